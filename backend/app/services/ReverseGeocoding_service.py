import httpx
import logging
from app.core.config import settings
from app.core.http_client import fetch_json
from app.core.logger import logs
from app.models.route_model import AreaMetadata, AreaClassification

UNKNOWN = "Unknown"

class ReverseGeocodingService:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self.client = client
        self.reverse_url = f"{settings.NOMINATIM_URL.rstrip('/')}/reverse"

    async def reverse_geocode(self, lat: float, lon: float) -> AreaMetadata:
        logs.log(logging.INFO, f"Reverse geocoding {lat}, {lon}")
        data = await fetch_json(
            self.reverse_url,
            params={"format": "json", "lat": lat, "lon": lon},
            headers={"User-Agent": settings.NOMINATIM_USER_AGENT},
            client=self.client,
            service_name="Reverse geocoding",
        )
        address = data.get("address") if isinstance(data, dict) else None
        return parse_area_metadata(address or {})


def parse_area_metadata(address: dict) -> AreaMetadata:
    """
    Maps a Nominatim `address` object onto AreaMetadata.
    Missing fields become "Unknown"; a resolved city or town means Urban.
    """
    place_type = (
        address.get("city")
        or address.get("town")
        or address.get("village")
        or address.get("hamlet")
        or UNKNOWN
    )
    urban = bool(address.get("city") or address.get("town"))

    return AreaMetadata(
        state=address.get("state") or UNKNOWN,
        county=address.get("county") or address.get("suburb") or UNKNOWN,
        pincode=address.get("postcode") or UNKNOWN,
        place_type=place_type,
        area_type=AreaClassification.URBAN if urban else AreaClassification.RURAL,
    )
