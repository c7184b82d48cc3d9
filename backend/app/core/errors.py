"""
Error taxonomy for the route finder.
Every error carries the HTTP status code the API layer answers with.
"""


class RouteFinderError(Exception):
    """Base class for all errors reported back to the user."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(RouteFinderError):
    """Start or destination missing. Raised before any network call."""
    status_code = 400


class InvalidCredentialsError(RouteFinderError):
    status_code = 400


class UnknownSessionError(RouteFinderError):
    status_code = 401


class AddressNotFoundError(RouteFinderError):
    """Geocoding returned an empty match set."""
    status_code = 404

    def __init__(self, address: str):
        super().__init__(f"Address not found: {address}")
        self.address = address


class NoRouteError(RouteFinderError):
    status_code = 404

    def __init__(self, message: str = "No route found"):
        super().__init__(message)


class UpstreamError(RouteFinderError):
    """Transport failure, non-2xx answer or malformed payload from an upstream API."""
    status_code = 502
