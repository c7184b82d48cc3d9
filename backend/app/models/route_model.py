from pydantic import BaseModel, Field
from typing import List, Optional, Tuple
from enum import Enum

LatLon = Tuple[float, float]

# --- Enums ---
class AreaClassification(str, Enum):
    URBAN = "Urban"
    RURAL = "Rural"

# --- Domain Models ---
class Coordinate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    display_name: str

class AreaMetadata(BaseModel):
    state: str = "Unknown"
    county: str = "Unknown"
    pincode: str = "Unknown"
    place_type: str = "Unknown"
    area_type: AreaClassification = AreaClassification.RURAL

class RouteGeometry(BaseModel):
    """One routing alternative; rank 0 is the first route the router returned."""
    rank: int
    points: List[LatLon]
    distance: Optional[float] = None  # metres
    duration: Optional[float] = None  # seconds

class RouteSet(BaseModel):
    routes: List[RouteGeometry] = []

class RouteOverlay(BaseModel):
    rank: int
    color: str
    weight: int
    points: List[LatLon]

class MapState(BaseModel):
    center: LatLon
    zoom: int
    overlays: List[RouteOverlay] = []
    bounds: Optional[Tuple[LatLon, LatLon]] = None  # (south-west, north-east)
    padding: Optional[Tuple[int, int]] = None

class EndpointSummary(BaseModel):
    display_name: str
    metadata: AreaMetadata

class RouteSummary(BaseModel):
    start: EndpointSummary
    end: EndpointSummary
    routes: List[str] = []
    traffic_legend: str
    text: str

class RouteResult(BaseModel):
    route_set: RouteSet
    summary: RouteSummary

# --- API Request/Response Models ---
class RouteRequest(BaseModel):
    session_id: str = Field(..., description="Session token returned by /login")
    start: str = Field(..., description="Starting point, free text")
    end: str = Field(..., description="Destination, free text")

class RouteResponse(BaseModel):
    session_id: str
    status: str
    summary: RouteSummary
    routes: List[RouteGeometry] = []
    map_state: MapState

class StatusResponse(BaseModel):
    session_id: str
    status: str
    summary: Optional[RouteSummary] = None
