"""Directed graph of MBTA stations built from canonical route patterns."""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional

from .exceptions import MalformedInputError, StationNotFoundError
from .models import Direction, RoutePattern, Stop

logger = logging.getLogger(__name__)


def _add_route_id(route_ids: List[str], route_id: str) -> None:
    """Append route_id unless already present (keeps first-seen order)."""
    if route_id not in route_ids:
        route_ids.append(route_id)


class Edge:
    """A directed connection between two stations, made by one or more routes."""

    def __init__(self, source_id: str, dest_id: str, route_ids: Optional[List[str]] = None):
        self.source_id = source_id
        self.dest_id = dest_id
        self.route_ids: List[str] = list(route_ids or [])

    def add_route(self, route_id: str) -> None:
        _add_route_id(self.route_ids, route_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return (
            self.source_id == other.source_id
            and self.dest_id == other.dest_id
            and set(self.route_ids) == set(other.route_ids)
        )

    def __hash__(self) -> int:
        return hash((self.source_id, self.dest_id, frozenset(self.route_ids)))

    def __repr__(self) -> str:
        return f"Edge({self.source_id!r} -> {self.dest_id!r}, routes={self.route_ids!r})"


class StationNode:
    """
    A full station (not a platform) in the transit graph.

    Outgoing edges are keyed by destination station ID in discovery order.
    Equality and hashing consider the station ID, name, set of route IDs and
    the set of destination IDs, but not the contents of the edges.
    """

    def __init__(
        self,
        station_id: str,
        name: str,
        route_ids: Optional[List[str]] = None,
        outgoing_edges: Optional[Dict[str, Edge]] = None,
    ):
        self.station_id = station_id
        self.name = name
        self.route_ids: List[str] = list(route_ids or [])
        self.outgoing_edges: Dict[str, Edge] = dict(outgoing_edges or {})

    def add_route(self, route_id: str) -> None:
        _add_route_id(self.route_ids, route_id)

    def _key(self):
        return (
            self.station_id,
            self.name,
            frozenset(self.route_ids),
            frozenset(self.outgoing_edges.keys()),
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, StationNode):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"StationNode({self.station_id!r}, {self.name!r}, routes={self.route_ids!r}, "
            f"to={list(self.outgoing_edges)!r})"
        )


class TransitGraph:
    """
    A graph of MBTA stations and the routes connecting them.

    Each node is a full station; each directed edge is a direct hop between two
    consecutive stations on at least one route pattern. Nodes are stored in the
    order they were first discovered.
    """

    def __init__(self, nodes: Optional[Dict[str, StationNode]] = None):
        self.nodes: Dict[str, StationNode] = nodes if nodes is not None else {}

    @property
    def station_nodes(self) -> List[StationNode]:
        """All station nodes in discovery order."""
        return list(self.nodes.values())

    @classmethod
    def from_route_patterns(cls, patterns: Iterable[RoutePattern]) -> "TransitGraph":
        """
        Build a transit graph from a list of route patterns.

        One node is created per station ID and one edge per direct connection
        between consecutive stations. Nodes and edges shared by several
        patterns accumulate the route IDs of all of them.

        Args:
            patterns: Route patterns to merge, processed in order.

        Returns:
            TransitGraph object.

        Raises:
            MalformedInputError: If a pattern has no route ID or stop list, or
                a stop resolves to a station without an ID. No partial graph
                is returned.
        """
        nodes: Dict[str, StationNode] = {}
        pattern_count = 0

        for pattern in patterns:
            if pattern.route_id is None or pattern.stops is None:
                raise MalformedInputError(
                    f"Route pattern {pattern.id} is missing its route or stop list"
                )
            route_id = pattern.route_id
            stations = [cls._resolve_station(stop, pattern) for stop in pattern.stops]

            for station in stations:
                node = nodes.get(station.id)
                if node is None:
                    nodes[station.id] = StationNode(station.id, station.name, [route_id])
                else:
                    node.add_route(route_id)

            # Connect consecutive stations
            for current, following in zip(stations, stations[1:]):
                source = nodes[current.id]
                edge = source.outgoing_edges.get(following.id)
                if edge is None:
                    source.outgoing_edges[following.id] = Edge(current.id, following.id, [route_id])
                else:
                    edge.add_route(route_id)

            pattern_count += 1

        logger.debug(f"Built transit graph with {len(nodes)} stations from {pattern_count} patterns")
        return cls(nodes)

    @staticmethod
    def _resolve_station(stop: Optional[Stop], pattern: RoutePattern) -> Stop:
        """Return the full station for a stop, validating that it has an ID."""
        if stop is None:
            raise MalformedInputError(f"Route pattern {pattern.id} contains a missing stop")
        station = stop.station
        if station.id is None:
            raise MalformedInputError(
                f"Route pattern {pattern.id} has a stop or parent station with no ID"
            )
        return station

    def get_node(self, station_id: str) -> StationNode:
        """Get a station node by station ID."""
        if station_id not in self.nodes:
            raise StationNotFoundError(station_id)
        return self.nodes[station_id]

    def find_station(self, name: str) -> StationNode:
        """
        Find a station node by name (case-insensitive exact match).

        Raises:
            StationNotFoundError: If no station has that name.
        """
        name_lower = name.lower()
        for node in self.nodes.values():
            if node.name.lower() == name_lower:
                return node
        raise StationNotFoundError(name)

    def stations_for_route(self, route_id: str) -> List[StationNode]:
        """Get all stations served by a route, in discovery order."""
        return [node for node in self.nodes.values() if route_id in node.route_ids]

    def stop_counts(self, route_ids: Iterable[str]) -> Dict[str, int]:
        """Count the stations served by each of the given routes (0 if none)."""
        counts = {route_id: 0 for route_id in route_ids}
        for node in self.nodes.values():
            for route_id in node.route_ids:
                if route_id in counts:
                    counts[route_id] += 1
        return counts

    def find_path(self, source_name: str, dest_name: str) -> Optional[List[Direction]]:
        """
        Find a path with the fewest stops between two stations.

        Args:
            source_name: Name of the starting station (case-insensitive).
            dest_name: Name of the destination station (case-insensitive).

        Returns:
            List of (route_id, next stop name) pairs, excluding the source
            station, or None if no path exists or both names refer to the same
            station.

        Raises:
            StationNotFoundError: If either station name is unknown.
        """
        source = self.find_station(source_name)
        dest = self.find_station(dest_name)

        edge_path = self._bfs(source, dest)
        if edge_path is None:
            return None

        return self._directions_from_edges(edge_path)

    def _bfs(self, source: StationNode, dest: StationNode) -> Optional[List[Edge]]:
        """Breadth-first search returning the edges from source to dest."""
        if source.station_id == dest.station_id:
            return None

        # station_id -> edge used to discover it (None for the source)
        parent_edges: Dict[str, Optional[Edge]] = {source.station_id: None}
        queue = deque([source])
        found = False

        while queue and not found:
            current = queue.popleft()
            for dest_id, edge in current.outgoing_edges.items():
                if dest_id in parent_edges:
                    continue
                parent_edges[dest_id] = edge
                if dest_id == dest.station_id:
                    found = True
                    break
                queue.append(self.nodes[dest_id])

        if not found:
            return None

        path: List[Edge] = []
        edge = parent_edges[dest.station_id]
        while edge is not None:
            path.append(edge)
            edge = parent_edges[edge.source_id]
        path.reverse()
        return path

    def _directions_from_edges(self, path: List[Edge]) -> List[Direction]:
        """
        Convert an edge path into (route_id, stop name) directions.

        Stays on the current route for as long as it makes the next hop, and
        otherwise boards the first route listed on the edge.
        """
        directions: List[Direction] = []
        current_route: Optional[str] = None

        for edge in path:
            if current_route is None or current_route not in edge.route_ids:
                current_route = edge.route_ids[0]
            directions.append((current_route, self.nodes[edge.dest_id].name))

        return directions
