"""
In-memory storage for logged-in sessions.
Nothing is persisted: a restart forgets every session and drawn route.
"""
import asyncio
import logging
from typing import Awaitable, Callable

from app.core.errors import UnknownSessionError
from app.core.logger import logs
from app.models.route_model import RouteSet, RouteSummary
from app.models.session_model import Session
from app.services.Map_service import MapRenderer

IDLE_STATUS = "Enter start and destination, then click Get Route."

MapFactory = Callable[[], Awaitable[MapRenderer]]


class RouteWorkspace:
    """Everything the route finder view owns for one session."""

    def __init__(self, session: Session, map_factory: MapFactory):
        self.session = session
        self.status = IDLE_STATUS
        self.summary: RouteSummary | None = None
        self.route_set: RouteSet | None = None
        self._map_factory = map_factory
        self._map: MapRenderer | None = None
        self._map_lock = asyncio.Lock()

    @property
    def map_ready(self) -> bool:
        return self._map is not None

    async def get_map(self) -> MapRenderer:
        """Creates the map surface on first use; later calls return the same one."""
        async with self._map_lock:
            if self._map is None:
                self._map = await self._map_factory()
        return self._map


class SessionRepository:
    def __init__(self, map_factory: MapFactory):
        self.map_factory = map_factory
        self._workspaces: dict[str, RouteWorkspace] = {}

    def create(self, session: Session) -> RouteWorkspace:
        workspace = RouteWorkspace(session, self.map_factory)
        self._workspaces[session.session_id] = workspace
        logs.log(logging.INFO, f"Session created for '{session.username}'", extra={"session_id": session.session_id})
        return workspace

    def get(self, session_id: str) -> RouteWorkspace:
        workspace = self._workspaces.get(session_id)
        if workspace is None:
            raise UnknownSessionError("Unknown or expired session. Please log in again.")
        return workspace

    def __len__(self) -> int:
        return len(self._workspaces)
