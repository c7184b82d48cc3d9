import logging
from app.core.config import settings
from app.core.errors import InvalidInputError, RouteFinderError, UpstreamError
from app.core.logger import logs
from app.models.route_model import (
    AreaMetadata,
    Coordinate,
    EndpointSummary,
    RouteGeometry,
    RouteResult,
    RouteSet,
    RouteSummary,
)
from app.repos.session_repo import RouteWorkspace
from app.services.Geocoding_service import GeocodingService
from app.services.ReverseGeocoding_service import ReverseGeocodingService
from app.services.Routing_service import RoutingService
from app.services.Map_service import bounding_region

# Fixed congestion convention by rank, not live traffic data
ROUTE_COLORS = ("green", "yellow", "red")
TRAFFIC_LEGEND = "Green (Low), Yellow (Medium), Red (High)"

IN_PROGRESS_STATUS = "Finding routes and analyzing traffic..."
MISSING_INPUT_MESSAGE = "Please enter both starting point and destination."


class RouteOrchestrator:
    def __init__(
        self,
        workspace: RouteWorkspace,
        geocoder: GeocodingService,
        reverse_geocoder: ReverseGeocodingService,
        router: RoutingService,
        max_routes: int | None = None,
        fit_padding: int | None = None,
    ):
        self.workspace = workspace
        self.geocoder = geocoder
        self.reverse_geocoder = reverse_geocoder
        self.router = router
        self.max_routes = min(max_routes or settings.MAX_ROUTES, len(ROUTE_COLORS))
        padding = fit_padding if fit_padding is not None else settings.FIT_PADDING
        self.fit_padding = (padding, padding)

    async def calculate_route(self, start: str, end: str) -> RouteResult:
        """
        Turns two place names into drawn routes plus a summary:
        geocode start -> geocode end -> route -> redraw map -> reverse geocode both.
        Any failure is written to the workspace status and re-raised.
        """
        start, end = start.strip(), end.strip()
        if not start or not end:
            self.workspace.status = MISSING_INPUT_MESSAGE
            raise InvalidInputError(MISSING_INPUT_MESSAGE)

        self.workspace.status = IN_PROGRESS_STATUS
        logs.log(logging.INFO, f"Calculating route '{start}' -> '{end}'", extra={"user": self.workspace.session.username})

        try:
            start_coords = await self.geocoder.geocode(start)
            end_coords = await self.geocoder.geocode(end)

            routes = await self.router.find_routes(start_coords, end_coords, alternatives=True)
            route_set = RouteSet(routes=routes[: self.max_routes])
            if any(not route.points for route in route_set.routes):
                raise UpstreamError("Routing returned a malformed geometry")

            # Old overlays go only once new route data is confirmed
            await self._draw(route_set)

            start_info = await self.reverse_geocoder.reverse_geocode(start_coords.lat, start_coords.lon)
            end_info = await self.reverse_geocoder.reverse_geocode(end_coords.lat, end_coords.lon)
        except RouteFinderError as e:
            self.workspace.status = f"Error: {e.message}"
            logs.log(logging.ERROR, f"Route calculation failed: {e.message}")
            raise

        summary = build_summary(start_coords, start_info, end_coords, end_info, route_set.routes)
        self.workspace.summary = summary
        self.workspace.status = summary.text
        logs.log(logging.INFO, f"✓ Route ready with {len(route_set.routes)} alternative(s)")
        return RouteResult(route_set=route_set, summary=summary)

    async def _draw(self, route_set: RouteSet):
        region = bounding_region(route_set.routes[0].points)
        surface = await self.workspace.get_map()
        surface.clear_route_overlays()
        for index, route in enumerate(route_set.routes):
            surface.draw_polyline(route.points, ROUTE_COLORS[index])
        surface.fit_bounds(region, self.fit_padding)
        self.workspace.route_set = route_set


def describe_route(route: RouteGeometry) -> str:
    label = f"Route {route.rank + 1} ({ROUTE_COLORS[route.rank]})"
    if route.distance is None or route.duration is None:
        return label
    return f"{label}: {route.distance / 1000:.1f} km, {route.duration / 60:.0f} min"


def _endpoint_lines(label: str, coords: Coordinate, info: AreaMetadata) -> list[str]:
    return [
        f"{label}: {coords.display_name}",
        f"State: {info.state}",
        f"Mandal: {info.county}",
        f"Pincode: {info.pincode}",
        f"Place: {info.place_type}",
        f"Type: {info.area_type.value}",
    ]


def build_summary(
    start_coords: Coordinate,
    start_info: AreaMetadata,
    end_coords: Coordinate,
    end_info: AreaMetadata,
    routes: list[RouteGeometry],
) -> RouteSummary:
    route_lines = [describe_route(r) for r in routes]
    lines = (
        _endpoint_lines("From", start_coords, start_info)
        + [""]
        + _endpoint_lines("To", end_coords, end_info)
        + [""]
        + route_lines
        + [f"Traffic: {TRAFFIC_LEGEND}"]
    )
    return RouteSummary(
        start=EndpointSummary(display_name=start_coords.display_name, metadata=start_info),
        end=EndpointSummary(display_name=end_coords.display_name, metadata=end_info),
        routes=route_lines,
        traffic_legend=TRAFFIC_LEGEND,
        text="\n".join(lines),
    )
