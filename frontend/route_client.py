import os
import html
from dataclasses import dataclass

import requests

# Backend API configuration
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

# A /route call makes up to five upstream requests (geocode x2, route, reverse x2),
# each bounded by the backend's HTTP_TIMEOUT
UPSTREAM_CALLS_PER_ROUTE = 5
BACKEND_HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))
ROUTE_TIMEOUT_MARGIN = 10

MISSING_INPUT_MESSAGE = "Please enter both starting point and destination."


def route_timeout(http_timeout: float = BACKEND_HTTP_TIMEOUT) -> float:
    """Seconds to wait on POST /route: the backend's worst case plus a margin."""
    return UPSTREAM_CALLS_PER_ROUTE * http_timeout + ROUTE_TIMEOUT_MARGIN


@dataclass(frozen=True)
class Session:
    session_id: str
    username: str


def call_backend(method: str, path: str, payload: dict = None, timeout: float = 60) -> dict:
    """Call the backend API and return the JSON body, or {"error": ...}."""
    try:
        response = requests.request(method, f"{BACKEND_URL}{path}", json=payload, timeout=timeout)
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            return {"error": str(detail), "status_code": response.status_code}
        return response.json()
    except requests.exceptions.ConnectionError:
        return {"error": "Cannot connect to backend. Make sure the backend is running on port 8000."}
    except requests.exceptions.Timeout:
        return {"error": "Request timed out. Please try again."}
    except requests.exceptions.RequestException as e:
        return {"error": f"An error occurred: {str(e)}"}


def request_route(session: Session, start: str, end: str) -> dict:
    """
    Ask the backend for routes between two places.
    Blank input never reaches the backend; the reply carries the
    missing-input message as both error and status.
    """
    if not start.strip() or not end.strip():
        return {"error": MISSING_INPUT_MESSAGE, "status": MISSING_INPUT_MESSAGE, "status_code": 400}
    return call_backend(
        "POST", "/route",
        {"session_id": session.session_id, "start": start, "end": end},
        timeout=route_timeout(),
    )


def fetch_map_html(session: Session) -> str | None:
    try:
        response = requests.get(f"{BACKEND_URL}/map/{session.session_id}", timeout=30)
        response.raise_for_status()
        return response.text
    except requests.exceptions.RequestException:
        return None


def check_backend_health() -> bool:
    """Check if backend is running."""
    try:
        response = requests.get(f"{BACKEND_URL}/health", timeout=2)
        return response.status_code == 200
    except requests.exceptions.RequestException:
        return False


def status_to_html(text: str) -> str:
    """Bold the 'Label:' prefix of each status line."""
    lines = []
    for line in text.split("\n"):
        label, sep, value = line.partition(": ")
        if sep and len(label) <= 12:
            lines.append(f"<strong>{html.escape(label)}:</strong> {html.escape(value)}")
        else:
            lines.append(html.escape(line))
    return "<br>".join(lines)
