"""Main subway model: loaded routes, transit graph, and the queries over them."""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .exceptions import NotLoadedError, RouteNotFoundError
from .mbta_client import MBTAClient
from .models import Route, RouteDirection
from .transit_graph import TransitGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubwayData:
    """One consistent generation of loaded data, replaced as a whole on reload."""
    routes: Tuple[Route, ...]
    graph: TransitGraph
    stops_per_route: Mapping[Route, int]  # Route -> number of stations served

    def get_route(self, route_id: str) -> Route:
        for route in self.routes:
            if route.id == route_id:
                return route
        raise RouteNotFoundError(route_id)


class SubwayModel:
    """
    Loads MBTA subway data and answers questions about it.

    This class provides methods to:
    - Load (and reload) subway routes and build the transit graph
    - Find the routes with the most and fewest stops
    - List transfer stations and the routes they connect
    - Find a path with the fewest stops between two stations
    """

    def __init__(self, client: Optional[MBTAClient] = None):
        """
        Initialize the model.

        Args:
            client: Source of routes and route patterns. Defaults to an
                MBTAClient for the public MBTA API.
        """
        self.client = client or MBTAClient()
        self._data: Optional[SubwayData] = None

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    def load_route_data(self) -> None:
        """
        Load subway routes and canonical route patterns, and build the graph.

        Loads are all-or-nothing: if anything fails, the previously loaded data
        is kept unchanged.

        Raises:
            DataLoadError: If the data cannot be fetched or parsed.
            MalformedInputError: If the route patterns cannot form a graph.
        """
        routes = self.client.get_subway_routes()
        patterns = self.client.get_canonical_route_patterns([route.id for route in routes])
        graph = TransitGraph.from_route_patterns(patterns)

        counts = graph.stop_counts(route.id for route in routes)
        stops_per_route = MappingProxyType({route: counts[route.id] for route in routes})

        self._data = SubwayData(tuple(routes), graph, stops_per_route)
        logger.info(
            f"Loaded {len(routes)} routes, {len(patterns)} route patterns "
            f"and {len(graph.nodes)} stations"
        )

    def _require_data(self) -> SubwayData:
        if self._data is None:
            raise NotLoadedError()
        return self._data

    def get_routes(self) -> List[Route]:
        """Get the most recently loaded list of subway routes."""
        return list(self._require_data().routes)

    def get_route_with_most_stops(self) -> Optional[Tuple[Route, int]]:
        """
        Get the route serving the most stations and its station count.

        Ties go to the route with the lexicographically smallest ID.

        Returns:
            (Route, count), or None if no routes are loaded.
        """
        return self._extreme_route(most=True)

    def get_route_with_fewest_stops(self) -> Optional[Tuple[Route, int]]:
        """
        Get the route serving the fewest stations and its station count.

        Ties go to the route with the lexicographically smallest ID.

        Returns:
            (Route, count), or None if no routes are loaded.
        """
        return self._extreme_route(most=False)

    def _extreme_route(self, most: bool) -> Optional[Tuple[Route, int]]:
        stops_per_route = self._require_data().stops_per_route
        if not stops_per_route:
            return None

        if most:
            route = min(stops_per_route, key=lambda r: (-stops_per_route[r], r.id))
        else:
            route = min(stops_per_route, key=lambda r: (stops_per_route[r], r.id))
        return route, stops_per_route[route]

    def get_transfer_stops(self) -> Dict[str, List[Route]]:
        """
        Get all stations connecting two or more routes.

        Returns:
            Dictionary mapping station name to the routes serving it. If two
            stations share a name, the one discovered last wins.
        """
        data = self._require_data()
        transfer_stops: Dict[str, List[Route]] = {}

        for node in data.graph.station_nodes:
            if len(node.route_ids) >= 2:
                transfer_stops[node.name] = [data.get_route(route_id) for route_id in node.route_ids]

        return transfer_stops

    def find_path(self, source_name: str, dest_name: str) -> Optional[List[RouteDirection]]:
        """
        Find a path with the fewest stops between two stations.

        Args:
            source_name: Name of the starting station (case-insensitive).
            dest_name: Name of the destination station (case-insensitive).

        Returns:
            List of (Route, next stop name) pairs, or None if no path exists
            (including when both names refer to the same station).

        Raises:
            StationNotFoundError: If either station name is unknown.
            RouteNotFoundError: If the path uses a route that was not loaded.
        """
        data = self._require_data()
        directions = data.graph.find_path(source_name, dest_name)
        if directions is None:
            return None

        return [(data.get_route(route_id), stop_name) for route_id, stop_name in directions]
