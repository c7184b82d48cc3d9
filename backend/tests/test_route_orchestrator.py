"""Route orchestration against fake upstream services and a recording map."""
import asyncio
import httpx
import pytest

from app.core.errors import AddressNotFoundError, InvalidInputError, NoRouteError, UpstreamError
from app.models.route_model import AreaClassification, RouteGeometry
from app.repos.session_repo import IDLE_STATUS
from app.services.ReverseGeocoding_service import ReverseGeocodingService
from app.services.Route_orchestrator import (
    MISSING_INPUT_MESSAGE,
    TRAFFIC_LEGEND,
    RouteOrchestrator,
    build_summary,
    describe_route,
)
from conftest import HYDERABAD, SECUNDERABAD, FakeReverseGeocoder, FakeRouter, make_routes


def run_route(orchestrator, start="Hyderabad", end="Secunderabad"):
    return asyncio.run(orchestrator.calculate_route(start, end))


def test_hyderabad_to_secunderabad(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    result = run_route(orchestrator)

    # Two alternatives drawn, best first
    assert [color for color, _ in fake_map.overlays] == ["green", "yellow"]
    assert len(result.route_set.routes) == 2

    assert result.summary.start.metadata.area_type == AreaClassification.URBAN
    assert result.summary.end.metadata.area_type == AreaClassification.RURAL
    assert HYDERABAD.display_name in result.summary.text
    assert SECUNDERABAD.display_name in result.summary.text
    assert f"Traffic: {TRAFFIC_LEGEND}" in result.summary.text

    assert workspace.status == result.summary.text
    assert workspace.summary == result.summary
    assert workspace.route_set == result.route_set


def test_calls_happen_in_order(workspace, geocoder, reverse_geocoder, router):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    run_route(orchestrator)

    assert geocoder.calls == ["Hyderabad", "Secunderabad"]
    assert router.calls == [(HYDERABAD, SECUNDERABAD, True)]
    assert reverse_geocoder.calls == [(HYDERABAD.lat, HYDERABAD.lon), (SECUNDERABAD.lat, SECUNDERABAD.lon)]


def test_places_are_trimmed(workspace, geocoder, reverse_geocoder, router):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    run_route(orchestrator, "  Hyderabad ", "Secunderabad\n")

    assert geocoder.calls == ["Hyderabad", "Secunderabad"]


@pytest.mark.parametrize("returned, expected_colors", [
    (1, ["green"]),
    (2, ["green", "yellow"]),
    (3, ["green", "yellow", "red"]),
    (5, ["green", "yellow", "red"]),
])
def test_overlay_count_is_capped_at_three(workspace, geocoder, reverse_geocoder, fake_map, returned, expected_colors):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, FakeRouter(make_routes(returned)))

    result = run_route(orchestrator)

    assert [color for color, _ in fake_map.overlays] == expected_colors
    assert [r.rank for r in result.route_set.routes] == list(range(len(expected_colors)))


def test_viewport_fits_first_route(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    run_route(orchestrator)

    first = router.routes[0].points
    south_west = (min(p[0] for p in first), min(p[1] for p in first))
    north_east = (max(p[0] for p in first), max(p[1] for p in first))
    assert fake_map.events[-1] == ("fit", (south_west, north_east), (50, 50))


def test_clear_runs_once_and_before_drawing(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    run_route(orchestrator)
    run_route(orchestrator)

    kinds = [event[0] for event in fake_map.events]
    assert kinds == ["clear", "draw", "draw", "fit", "clear", "draw", "draw", "fit"]
    # No overlays leak from the first request
    assert len(fake_map.overlays) == 2


def test_same_inputs_give_same_result(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    first = run_route(orchestrator)
    overlays_after_first = list(fake_map.overlays)
    second = run_route(orchestrator)

    assert first == second
    assert fake_map.overlays == overlays_after_first


def test_map_surface_created_once(workspace, geocoder, reverse_geocoder, router, map_factory):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    run_route(orchestrator)
    run_route(orchestrator)

    assert map_factory.calls == 1


@pytest.mark.parametrize("start, end", [("", "Secunderabad"), ("Hyderabad", "   "), (" \t", "")])
def test_missing_input_makes_no_calls(workspace, geocoder, reverse_geocoder, router, map_factory, start, end):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    with pytest.raises(InvalidInputError):
        run_route(orchestrator, start, end)

    assert geocoder.calls == []
    assert router.calls == []
    assert reverse_geocoder.calls == []
    assert map_factory.calls == 0
    assert workspace.status == MISSING_INPUT_MESSAGE


def test_start_not_found_stops_everything(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    with pytest.raises(AddressNotFoundError) as exc_info:
        run_route(orchestrator, "Atlantis", "Secunderabad")

    assert exc_info.value.address == "Atlantis"
    assert geocoder.calls == ["Atlantis"]
    assert router.calls == []
    assert reverse_geocoder.calls == []
    assert fake_map.events == []
    assert workspace.status == "Error: Address not found: Atlantis"


def test_end_not_found_reports_end(workspace, geocoder, reverse_geocoder, router):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)

    with pytest.raises(AddressNotFoundError):
        run_route(orchestrator, "Hyderabad", "Atlantis")

    assert geocoder.calls == ["Hyderabad", "Atlantis"]
    assert router.calls == []
    assert workspace.status == "Error: Address not found: Atlantis"


def test_failed_request_keeps_previous_routes(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)
    run_route(orchestrator)
    events_before = list(fake_map.events)
    overlays_before = list(fake_map.overlays)

    router.routes = []
    with pytest.raises(NoRouteError):
        run_route(orchestrator)

    assert fake_map.events == events_before
    assert fake_map.overlays == overlays_before
    assert workspace.status == "Error: No route found"


def test_reverse_geocode_failure_leaves_routes_drawn(workspace, geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, FakeReverseGeocoder({}, fail=True), router)

    with pytest.raises(UpstreamError):
        run_route(orchestrator)

    assert [color for color, _ in fake_map.overlays] == ["green", "yellow"]
    assert workspace.status.startswith("Error: Reverse geocoding request failed")
    assert workspace.summary is None


def test_workspace_starts_idle(workspace):
    assert workspace.status == IDLE_STATUS
    assert workspace.map_ready is False


def test_describe_route_formats_distance_and_duration():
    route = make_routes(2)[1]

    assert describe_route(route) == "Route 2 (yellow): 13.5 km, 30 min"


def test_describe_route_without_metrics():
    route = make_routes(1)[0].model_copy(update={"distance": None, "duration": None})

    assert describe_route(route) == "Route 1 (green)"


def test_summary_lists_both_endpoints(reverse_geocoder):
    start_info = reverse_geocoder.by_lat[HYDERABAD.lat]
    end_info = reverse_geocoder.by_lat[SECUNDERABAD.lat]

    summary = build_summary(HYDERABAD, start_info, SECUNDERABAD, end_info, make_routes(1))

    lines = summary.text.split("\n")
    assert lines[0] == f"From: {HYDERABAD.display_name}"
    assert "Mandal: Hyderabad" in lines
    assert "Pincode: 500003" in lines
    assert "Type: Urban" in lines and "Type: Rural" in lines
    assert summary.routes == ["Route 1 (green): 12.0 km, 25 min"]


def test_empty_geometry_keeps_previous_routes(workspace, geocoder, reverse_geocoder, router, fake_map):
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, router)
    run_route(orchestrator)
    events_before = list(fake_map.events)

    router.routes = [RouteGeometry(rank=0, points=[])]
    with pytest.raises(UpstreamError):
        run_route(orchestrator)

    assert fake_map.events == events_before
    assert [color for color, _ in fake_map.overlays] == ["green", "yellow"]
    assert workspace.status == "Error: Routing returned a malformed geometry"


def test_area_type_comes_from_raw_address(workspace, geocoder, router):
    addresses = {
        "17.385": {"city": "Hyderabad", "state": "Telangana", "postcode": "500001"},
        "17.4399": {"suburb": "Secunderabad", "state": "Telangana"},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"address": addresses[request.url.params["lat"]]})

    async def calculate():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            orchestrator = RouteOrchestrator(workspace, geocoder, ReverseGeocodingService(client), router)
            return await orchestrator.calculate_route("Hyderabad", "Secunderabad")

    result = asyncio.run(calculate())

    assert result.summary.start.metadata.area_type == AreaClassification.URBAN
    assert result.summary.start.metadata.place_type == "Hyderabad"
    assert result.summary.end.metadata.area_type == AreaClassification.RURAL
    assert result.summary.end.metadata.county == "Secunderabad"
    assert "Type: Urban" in result.summary.text
    assert "Type: Rural" in result.summary.text
    assert HYDERABAD.display_name in result.summary.text
    assert SECUNDERABAD.display_name in result.summary.text
