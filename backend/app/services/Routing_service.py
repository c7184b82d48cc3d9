import httpx
import logging
from app.core.config import settings
from app.core.errors import NoRouteError, UpstreamError
from app.core.http_client import fetch_json
from app.core.logger import logs
from app.models.route_model import Coordinate, RouteGeometry

class RoutingService:
    """
    Talks to the OSRM /route endpoint and normalizes its answer.
    OSRM wants (lon,lat) pairs; everything returned here is (lat, lon).
    """
    def __init__(self, client: httpx.AsyncClient | None = None, profile: str | None = None):
        self.client = client
        self.base_url = settings.OSRM_URL.rstrip("/")
        self.profile = profile or settings.OSRM_PROFILE

    def build_url(self, origin: Coordinate, destination: Coordinate) -> str:
        coords = f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        return f"{self.base_url}/route/v1/{self.profile}/{coords}"

    async def find_routes(
        self, origin: Coordinate, destination: Coordinate, alternatives: bool = True
    ) -> list[RouteGeometry]:
        """
        Returns the routes in the order OSRM sent them, which is treated as best-first.
        Raises NoRouteError when OSRM finds nothing.
        """
        params = {
            "overview": "full",
            "geometries": "geojson",
            "alternatives": "true" if alternatives else "false",
        }
        logs.log(logging.INFO, f"Requesting routes {origin.display_name} -> {destination.display_name}")
        data = await fetch_json(
            self.build_url(origin, destination),
            params=params,
            client=self.client,
            service_name="Routing",
            raise_for_status=False,
        )

        if not isinstance(data, dict):
            raise UpstreamError("Routing returned an invalid response")

        code = data.get("code")
        # OSRM answers NoRoute with HTTP 400, so the body decides
        if code not in (None, "Ok", "NoRoute"):
            raise UpstreamError(f"Routing error: {data.get('message', code)}")

        raw_routes = data.get("routes") or []
        if not raw_routes:
            logs.log(logging.WARNING, "✗ Routing returned no routes")
            raise NoRouteError()

        routes = [self._parse_route(rank, route) for rank, route in enumerate(raw_routes)]
        logs.log(logging.INFO, f"✓ Routing returned {len(routes)} route(s)")
        return routes

    def _parse_route(self, rank: int, route: dict) -> RouteGeometry:
        try:
            coordinates = route["geometry"]["coordinates"]
            points = [(float(c[1]), float(c[0])) for c in coordinates]
        except (KeyError, TypeError, IndexError, ValueError) as e:
            raise UpstreamError(f"Routing returned a malformed geometry: {str(e)}") from e
        if not points:
            raise UpstreamError("Routing returned a malformed geometry")

        return RouteGeometry(
            rank=rank,
            points=points,
            distance=route.get("distance"),
            duration=route.get("duration"),
        )
