import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from app.core.errors import RouteFinderError, UnknownSessionError
from app.core.logger import logs
from app.models.route_model import MapState, RouteRequest, RouteResponse, StatusResponse
from app.repos.session_repo import RouteWorkspace, SessionRepository
from app.routes.session_route import get_sessions
from app.services.Geocoding_service import GeocodingService
from app.services.ReverseGeocoding_service import ReverseGeocodingService
from app.services.Routing_service import RoutingService
from app.services.Route_orchestrator import RouteOrchestrator

router = APIRouter()

# --- Dependency Injection ---
def get_geocoder() -> GeocodingService:
    return GeocodingService()

def get_reverse_geocoder() -> ReverseGeocodingService:
    return ReverseGeocodingService()

def get_router() -> RoutingService:
    return RoutingService()

def get_workspace(session_id: str, sessions: SessionRepository = Depends(get_sessions)) -> RouteWorkspace:
    try:
        return sessions.get(session_id)
    except UnknownSessionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

# --- Endpoints ---
@router.post("/route", response_model=RouteResponse)
async def route_endpoint(
    request: RouteRequest,
    sessions: SessionRepository = Depends(get_sessions),
    geocoder: GeocodingService = Depends(get_geocoder),
    reverse_geocoder: ReverseGeocodingService = Depends(get_reverse_geocoder),
    routing: RoutingService = Depends(get_router),
):
    """
    Geocodes both places, draws up to three alternatives on the session's map
    and returns the summary. Failures keep the previously drawn routes.
    """
    workspace = get_workspace(request.session_id, sessions)
    orchestrator = RouteOrchestrator(workspace, geocoder, reverse_geocoder, routing)

    try:
        result = await orchestrator.calculate_route(request.start, request.end)
    except RouteFinderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        workspace.status = f"Error: {str(e)}"
        logs.log(logging.ERROR, f"Error in route_endpoint: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    surface = await workspace.get_map()
    return RouteResponse(
        session_id=request.session_id,
        status=workspace.status,
        summary=result.summary,
        routes=result.route_set.routes,
        map_state=surface.state()
    )

@router.get("/status/{session_id}", response_model=StatusResponse)
async def status_endpoint(workspace: RouteWorkspace = Depends(get_workspace)):
    return StatusResponse(
        session_id=workspace.session.session_id,
        status=workspace.status,
        summary=workspace.summary
    )

@router.get("/map/{session_id}", response_class=HTMLResponse)
async def map_endpoint(workspace: RouteWorkspace = Depends(get_workspace)):
    surface = await workspace.get_map()
    return HTMLResponse(content=surface.render_html())

@router.get("/map/{session_id}/state", response_model=MapState)
async def map_state_endpoint(workspace: RouteWorkspace = Depends(get_workspace)):
    surface = await workspace.get_map()
    return surface.state()
