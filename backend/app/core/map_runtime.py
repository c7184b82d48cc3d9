"""
Async, load-once access to the map library.

The map surface cannot be used before folium is available. Loading happens off
the event loop exactly once per process and yields a MapRuntime handle which is
passed explicitly to whatever draws maps.
"""
import asyncio
import importlib
import logging
from dataclasses import dataclass
from types import ModuleType

from app.core.config import Settings
from app.core.logger import logs


@dataclass(frozen=True)
class MapRuntime:
    folium: ModuleType
    tile_url: str
    attribution: str
    max_zoom: int


class MapRuntimeLoader:
    def __init__(self, settings: Settings, module_name: str = "folium"):
        self.settings = settings
        self.module_name = module_name
        self._runtime: MapRuntime | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._runtime is not None

    async def load(self) -> MapRuntime:
        async with self._lock:
            if self._runtime is None:
                logs.log(logging.INFO, f"Loading map runtime '{self.module_name}'")
                module = await asyncio.to_thread(importlib.import_module, self.module_name)
                self._runtime = MapRuntime(
                    folium=module,
                    tile_url=self.settings.MAP_TILE_URL,
                    attribution=self.settings.MAP_ATTRIBUTION,
                    max_zoom=self.settings.MAP_MAX_ZOOM,
                )
                logs.log(logging.INFO, "✓ Map runtime ready")
        return self._runtime
