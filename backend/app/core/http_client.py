import httpx
import logging
from typing import Any
from app.core.config import settings
from app.core.errors import UpstreamError
from app.core.logger import logs


async def fetch_json(
    url: str,
    params: dict | None = None,
    headers: dict | None = None,
    client: httpx.AsyncClient | None = None,
    service_name: str = "upstream",
    raise_for_status: bool = True,
) -> Any:
    """
    GET a JSON document from an upstream API.
    Uses the injected client when given, otherwise a short-lived one.
    Any transport or decoding failure is raised as UpstreamError. With
    raise_for_status=False an error status still returns its JSON body.
    """
    try:
        if client is not None:
            resp = await client.get(url, params=params, headers=headers, timeout=settings.HTTP_TIMEOUT)
        else:
            async with httpx.AsyncClient() as session:
                resp = await session.get(url, params=params, headers=headers, timeout=settings.HTTP_TIMEOUT)
        if raise_for_status:
            resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        logs.log(logging.ERROR, f"{service_name} request failed: {str(e)}")
        raise UpstreamError(f"{service_name} request failed: {str(e)}") from e
    except ValueError as e:
        logs.log(logging.ERROR, f"{service_name} returned invalid JSON: {str(e)}")
        raise UpstreamError(f"{service_name} returned an invalid response") from e
