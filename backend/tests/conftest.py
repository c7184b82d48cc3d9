import pytest
from app.core.errors import AddressNotFoundError, NoRouteError, UpstreamError
from app.models.route_model import AreaMetadata, AreaClassification, Coordinate, MapState, RouteGeometry, RouteOverlay
from app.models.session_model import Session
from app.repos.session_repo import RouteWorkspace


HYDERABAD = Coordinate(lat=17.385, lon=78.4867, display_name="Hyderabad, Telangana, India")
SECUNDERABAD = Coordinate(lat=17.4399, lon=78.4983, display_name="Secunderabad, Telangana, India")


def make_routes(count: int) -> list[RouteGeometry]:
    routes = []
    for rank in range(count):
        offset = rank * 0.01
        routes.append(RouteGeometry(
            rank=rank,
            points=[(17.385, 78.4867), (17.41 + offset, 78.49 + offset), (17.4399, 78.4983)],
            distance=12000.0 + rank * 1500,
            duration=1500.0 + rank * 300,
        ))
    return routes


class FakeGeocoder:
    def __init__(self, places: dict):
        self.places = places
        self.calls = []

    async def geocode(self, query: str) -> Coordinate:
        self.calls.append(query)
        if query not in self.places:
            raise AddressNotFoundError(query)
        return self.places[query]


class FakeReverseGeocoder:
    def __init__(self, by_lat: dict, fail: bool = False):
        self.by_lat = by_lat
        self.fail = fail
        self.calls = []

    async def reverse_geocode(self, lat: float, lon: float) -> AreaMetadata:
        self.calls.append((lat, lon))
        if self.fail:
            raise UpstreamError("Reverse geocoding request failed: boom")
        return self.by_lat.get(lat, AreaMetadata())


class FakeRouter:
    def __init__(self, routes: list[RouteGeometry]):
        self.routes = routes
        self.calls = []

    async def find_routes(self, origin, destination, alternatives=True):
        self.calls.append((origin, destination, alternatives))
        if not self.routes:
            raise NoRouteError()
        return list(self.routes)


class FakeMap:
    """Records every call the orchestrator makes on the map surface."""

    def __init__(self):
        self.events = []
        self.overlays = []
        self.bounds = None
        self.padding = None

    def initialize(self, center, zoom):
        self.events.append(("initialize",))

    def clear_route_overlays(self):
        self.events.append(("clear",))
        self.overlays = []

    def draw_polyline(self, points, color):
        self.events.append(("draw", color))
        self.overlays.append((color, list(points)))

    def fit_bounds(self, region, padding):
        self.events.append(("fit", region, padding))
        self.bounds = region
        self.padding = padding

    def state(self) -> MapState:
        return MapState(
            center=(17.385, 78.4867),
            zoom=10,
            overlays=[
                RouteOverlay(rank=i, color=color, weight=5, points=points)
                for i, (color, points) in enumerate(self.overlays)
            ],
            bounds=self.bounds,
            padding=self.padding,
        )

    def render_html(self) -> str:
        return "<html>" + ",".join(color for color, _ in self.overlays) + "</html>"


class MapFactory:
    def __init__(self, surface):
        self.surface = surface
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.surface


@pytest.fixture
def session():
    return Session(session_id="session-1", username="ravi")


@pytest.fixture
def fake_map():
    return FakeMap()


@pytest.fixture
def map_factory(fake_map):
    return MapFactory(fake_map)


@pytest.fixture
def workspace(session, map_factory):
    return RouteWorkspace(session, map_factory)


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Hyderabad": HYDERABAD, "Secunderabad": SECUNDERABAD})


@pytest.fixture
def reverse_geocoder():
    return FakeReverseGeocoder({
        HYDERABAD.lat: AreaMetadata(
            state="Telangana",
            county="Hyderabad",
            pincode="500001",
            place_type="Hyderabad",
            area_type=AreaClassification.URBAN,
        ),
        SECUNDERABAD.lat: AreaMetadata(
            state="Telangana",
            county="Secunderabad",
            pincode="500003",
            place_type="Unknown",
            area_type=AreaClassification.RURAL,
        ),
    })


@pytest.fixture
def router():
    return FakeRouter(make_routes(2))
