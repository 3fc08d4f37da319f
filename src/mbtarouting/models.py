"""Data models for MBTA subway routing."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Route:
    """Represents an MBTA subway route (e.g. the Red Line)."""
    id: str
    name: str = field(compare=False)  # long_name from the API


@dataclass
class Stop:
    """Represents a stop or platform, optionally belonging to a parent station."""
    id: Optional[str]
    name: str
    parent_station: Optional["Stop"] = None

    @property
    def station(self) -> "Stop":
        """The full station this stop belongs to (itself if it has no parent)."""
        return self.parent_station if self.parent_station is not None else self


@dataclass
class RoutePattern:
    """One canonical sequence of stops traveled along a route."""
    id: Optional[str]
    route_id: Optional[str]
    stops: Optional[List[Stop]]  # Stops of the representative trip


# (route_id, next stop name) as produced by the graph
Direction = Tuple[str, str]

# (route, next stop name) as returned by the subway model
RouteDirection = Tuple[Route, str]
