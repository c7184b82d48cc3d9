import httpx
import logging
from app.core.config import settings
from app.core.errors import AddressNotFoundError, UpstreamError
from app.core.http_client import fetch_json
from app.core.logger import logs
from app.models.route_model import Coordinate

class GeocodingService:
    def __init__(self, client: httpx.AsyncClient | None = None):
        self.client = client
        self.search_url = f"{settings.NOMINATIM_URL.rstrip('/')}/search"

    async def geocode(self, query: str) -> Coordinate:
        """Resolves a free-text place to the best Nominatim match."""
        logs.log(logging.INFO, f"Geocoding '{query}'")
        params = {"format": "json", "limit": 1, "q": query}
        data = await fetch_json(
            self.search_url,
            params=params,
            headers={"User-Agent": settings.NOMINATIM_USER_AGENT},
            client=self.client,
            service_name="Geocoding",
        )

        if not isinstance(data, list):
            raise UpstreamError("Geocoding returned an invalid response")
        if not data:
            logs.log(logging.WARNING, f"✗ No geocoding match for '{query}'")
            raise AddressNotFoundError(query)

        coordinate = parse_search_result(data[0])
        logs.log(logging.INFO, f"✓ '{query}' -> {coordinate.lat}, {coordinate.lon}")
        return coordinate


def parse_search_result(item: dict) -> Coordinate:
    try:
        return Coordinate(
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            display_name=item.get("display_name", ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"Geocoding returned a malformed result: {str(e)}") from e
