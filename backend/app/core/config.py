from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    LOGGER: int = 20

    # Nominatim (geocoding + reverse geocoding)
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    NOMINATIM_USER_AGENT: str = "FreeRouteFinder/1.0 (route-finder-backend)"  # Required by Nominatim ToS

    # OSRM (routing)
    OSRM_URL: str = "https://router.project-osrm.org"
    OSRM_PROFILE: str = "driving"

    HTTP_TIMEOUT: float = 20.0

    # Map surface
    MAP_CENTER_LAT: float = 17.385
    MAP_CENTER_LON: float = 78.4867
    MAP_ZOOM: int = 10
    MAP_TILE_URL: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    MAP_MAX_ZOOM: int = 19
    MAP_ATTRIBUTION: str = "© OpenStreetMap"

    # Route drawing
    ROUTE_LINE_WEIGHT: int = 5
    FIT_PADDING: int = 50
    MAX_ROUTES: int = 3

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"), 
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
