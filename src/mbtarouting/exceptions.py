"""Exceptions raised by the MBTA routing library."""

from typing import Optional


class RoutingError(Exception):
    """Base class for all routing errors."""


class NotLoadedError(RoutingError, RuntimeError):
    """Raised when the subway model is queried before route data was loaded."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "The route data has not been loaded yet."
        super().__init__(message)


class MalformedInputError(RoutingError, ValueError):
    """Raised when route pattern data is missing a route, stops, or a station ID."""


class StationNotFoundError(RoutingError, ValueError):
    """Raised when a station name cannot be found in the transit graph."""

    def __init__(self, station_name: str) -> None:
        self.station_name = station_name
        super().__init__(f"Station '{station_name}' not found")


class RouteNotFoundError(RoutingError, LookupError):
    """Raised when the graph references a route that was not loaded."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Route {route_id} not found in the loaded routes")


class DataLoadError(RoutingError, IOError):
    """Raised when route data cannot be fetched or parsed from the MBTA API."""
