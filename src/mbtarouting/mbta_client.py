"""MBTA v3 API client for subway routes and canonical route patterns."""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional

import requests

from .exceptions import DataLoadError
from .models import Route, RoutePattern, Stop

logger = logging.getLogger(__name__)

MBTA_API_BASE_URL = "https://api-v3.mbta.com/"

# Light Rail (0) and Heavy Rail (1) routes
SUBWAY_ROUTES_ENDPOINT = "routes"
SUBWAY_ROUTE_TYPES = "0,1"

ROUTE_PATTERNS_ENDPOINT = "route_patterns"
ROUTE_PATTERN_INCLUDES = "representative_trip.stops.parent_station"

DEFAULT_TIMEOUT = 10  # seconds


class MBTAClient:
    """Fetches and parses subway data from the MBTA v3 JSON:API."""

    def __init__(
        self,
        base_url: str = MBTA_API_BASE_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the MBTA client.

        Args:
            base_url: Base URL of the API; endpoint paths are appended to it.
            api_key: Optional MBTA API key. Falls back to the MBTA_API_KEY
                environment variable.
            timeout: Timeout in seconds for each request.
            session: Optional requests session to reuse.
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/vnd.api+json")

        api_key = api_key or os.environ.get("MBTA_API_KEY")
        if api_key:
            self.session.headers["x-api-key"] = api_key

    def get_subway_routes(self) -> List[Route]:
        """
        Get all subway routes (Light Rail and Heavy Rail).

        Returns:
            List of Route objects in API order.

        Raises:
            DataLoadError: If the routes cannot be fetched or parsed.
        """
        document = self._fetch_json(
            SUBWAY_ROUTES_ENDPOINT,
            {"filter[type]": SUBWAY_ROUTE_TYPES, "fields[route]": "long_name"},
        )
        try:
            routes = [self._parse_route(resource) for resource in document["data"]]
        except (KeyError, TypeError) as e:
            logger.error(f"Failed to parse routes: {e}")
            raise DataLoadError("The routes response could not be parsed") from e

        logger.debug(f"Parsed {len(routes)} subway routes")
        return routes

    def get_canonical_route_patterns(self, route_ids: Iterable[str]) -> List[RoutePattern]:
        """
        Get canonical route patterns for the given routes.

        Patterns belonging to any other route (e.g. replacement shuttles
        returned alongside the requested routes) are dropped.

        Args:
            route_ids: IDs of the routes to fetch patterns for.

        Returns:
            List of RoutePattern objects with their representative trip stops.

        Raises:
            DataLoadError: If the patterns cannot be fetched or parsed.
        """
        route_ids = list(route_ids)
        wanted = set(route_ids)
        document = self._fetch_json(
            ROUTE_PATTERNS_ENDPOINT,
            {
                "filter[route]": ",".join(route_ids),
                "filter[canonical]": "true",
                "include": ROUTE_PATTERN_INCLUDES,
            },
        )

        try:
            included = self._index_included(document.get("included", []))
            patterns = [
                self._parse_route_pattern(resource, included) for resource in document["data"]
            ]
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse route patterns: {e}")
            raise DataLoadError("The route patterns response could not be parsed") from e

        # Drop replacement shuttles and anything else outside the request
        filtered = [p for p in patterns if p.route_id is not None and p.route_id in wanted]
        if len(filtered) != len(patterns):
            logger.debug(f"Dropped {len(patterns) - len(filtered)} route patterns for other routes")
        return filtered

    def _fetch_json(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Fetch an endpoint and decode its JSON:API document.

        Args:
            endpoint: Path relative to the base URL.
            params: Query parameters.

        Returns:
            Decoded JSON document containing a "data" member.
        """
        url = self.base_url + endpoint
        logger.debug(f"Fetching {url} with {params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            document = response.json()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise DataLoadError(f"An error occurred while obtaining {url}") from e
        except ValueError as e:
            logger.error(f"Failed to decode response from {url}: {e}")
            raise DataLoadError(f"The response from {url} was not valid JSON") from e

        if not isinstance(document, dict) or not isinstance(document.get("data"), list):
            raise DataLoadError(f"The response from {url} has no data list")
        return document

    @staticmethod
    def _parse_route(resource: Dict[str, Any]) -> Route:
        route_id = resource.get("id")
        if not route_id:
            raise KeyError("id")
        return Route(id=route_id, name=resource["attributes"]["long_name"])

    @staticmethod
    def _index_included(resources: List[Dict[str, Any]]) -> Dict[tuple, Dict[str, Any]]:
        """Index included resources by (type, id)."""
        return {(resource["type"], resource["id"]): resource for resource in resources}

    @staticmethod
    def _related_id(resource: Dict[str, Any], relationship: str) -> Optional[str]:
        """Get the ID a to-one relationship points at, or None."""
        data = resource.get("relationships", {}).get(relationship, {}).get("data")
        return data["id"] if data else None

    def _parse_route_pattern(
        self, resource: Dict[str, Any], included: Dict[tuple, Dict[str, Any]]
    ) -> RoutePattern:
        """Build a RoutePattern, resolving its trip and stops from included resources."""
        route_id = self._related_id(resource, "route")
        trip_id = self._related_id(resource, "representative_trip")

        stops: Optional[List[Stop]] = None
        trip = included.get(("trip", trip_id)) if trip_id else None
        if trip is not None:
            stop_refs = trip.get("relationships", {}).get("stops", {}).get("data")
            if stop_refs is not None:
                stops = [self._parse_stop(ref["id"], included) for ref in stop_refs]

        return RoutePattern(id=resource.get("id"), route_id=route_id, stops=stops)

    def _parse_stop(self, stop_id: str, included: Dict[tuple, Dict[str, Any]]) -> Stop:
        """Build a Stop (and its parent station, one level deep) from included resources."""
        resource = included[("stop", stop_id)]
        parent = None
        parent_id = self._related_id(resource, "parent_station")
        if parent_id is not None:
            parent_resource = included[("stop", parent_id)]
            parent = Stop(id=parent_resource["id"], name=parent_resource["attributes"]["name"])
        return Stop(id=resource["id"], name=resource["attributes"]["name"], parent_station=parent)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
