"""Map surface the route orchestrator draws on."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from app.core.config import settings
from app.core.logger import logs
from app.core.map_runtime import MapRuntime, MapRuntimeLoader
from app.models.route_model import LatLon, MapState, RouteOverlay

Region = tuple[LatLon, LatLon]


@dataclass(frozen=True)
class MapHandle:
    center: LatLon
    zoom: int


def bounding_region(points: Sequence[LatLon]) -> Region:
    """South-west and north-east corners enclosing every point."""
    if not points:
        raise ValueError("Cannot compute bounds of an empty geometry")
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    return (min(lats), min(lons)), (max(lats), max(lons))


class MapRenderer(ABC):
    """
    Drawing surface used by the orchestrator.
    `initialize` must be called once before anything else.
    """

    @abstractmethod
    def initialize(self, center: LatLon, zoom: int) -> MapHandle:
        pass

    @abstractmethod
    def clear_route_overlays(self) -> None:
        pass

    @abstractmethod
    def draw_polyline(self, points: Sequence[LatLon], color: str) -> None:
        pass

    @abstractmethod
    def fit_bounds(self, region: Region, padding: tuple[int, int]) -> None:
        pass

    @abstractmethod
    def state(self) -> MapState:
        pass

    @abstractmethod
    def render_html(self) -> str:
        pass


class FoliumMapRenderer(MapRenderer):
    """
    Keeps the overlays and viewport as plain state and builds a fresh
    folium.Map whenever HTML is requested.
    """

    def __init__(self, runtime: MapRuntime, line_weight: int | None = None):
        self.runtime = runtime
        self.line_weight = line_weight or settings.ROUTE_LINE_WEIGHT
        self._handle: MapHandle | None = None
        self._overlays: list[RouteOverlay] = []
        self._bounds: Region | None = None
        self._padding: tuple[int, int] | None = None

    @property
    def initialized(self) -> bool:
        return self._handle is not None

    def initialize(self, center: LatLon, zoom: int) -> MapHandle:
        if self._handle is not None:
            raise RuntimeError("Map surface is already initialized")
        self._handle = MapHandle(center=(center[0], center[1]), zoom=zoom)
        logs.log(logging.INFO, f"Map initialized at {center} zoom {zoom}")
        return self._handle

    def _require_handle(self) -> MapHandle:
        if self._handle is None:
            raise RuntimeError("Map surface used before initialize()")
        return self._handle

    def clear_route_overlays(self) -> None:
        self._require_handle()
        if self._overlays:
            logs.log(logging.DEBUG, f"Removing {len(self._overlays)} route overlay(s)")
        self._overlays = []

    def draw_polyline(self, points: Sequence[LatLon], color: str) -> None:
        self._require_handle()
        self._overlays.append(
            RouteOverlay(
                rank=len(self._overlays),
                color=color,
                weight=self.line_weight,
                points=list(points),
            )
        )

    def fit_bounds(self, region: Region, padding: tuple[int, int]) -> None:
        self._require_handle()
        self._bounds = region
        self._padding = padding

    def state(self) -> MapState:
        handle = self._require_handle()
        return MapState(
            center=handle.center,
            zoom=handle.zoom,
            overlays=list(self._overlays),
            bounds=self._bounds,
            padding=self._padding,
        )

    def build_map(self):
        """Returns a folium.Map reflecting the current state."""
        handle = self._require_handle()
        folium = self.runtime.folium

        m = folium.Map(
            location=list(handle.center),
            zoom_start=handle.zoom,
            tiles=self.runtime.tile_url,
            attr=self.runtime.attribution,
            max_zoom=self.runtime.max_zoom,
        )
        for overlay in self._overlays:
            folium.PolyLine(
                locations=[list(p) for p in overlay.points],
                color=overlay.color,
                weight=overlay.weight,
                tooltip=f"Route {overlay.rank + 1}",
            ).add_to(m)

        if self._bounds is not None:
            south_west, north_east = self._bounds
            m.fit_bounds([list(south_west), list(north_east)], padding=self._padding)
        return m

    def render_html(self) -> str:
        return self.build_map().get_root().render()


async def open_map(loader: MapRuntimeLoader) -> FoliumMapRenderer:
    """Waits for the map runtime, then creates and initializes a surface."""
    runtime = await loader.load()
    renderer = FoliumMapRenderer(runtime)
    renderer.initialize((settings.MAP_CENTER_LAT, settings.MAP_CENTER_LON), settings.MAP_ZOOM)
    return renderer
