"""MBTARouting - Subway route analysis and path finding for the MBTA."""

__version__ = "0.1.0"

from .models import Route, Stop, RoutePattern
from .exceptions import (
    RoutingError,
    NotLoadedError,
    MalformedInputError,
    StationNotFoundError,
    RouteNotFoundError,
    DataLoadError,
)
from .transit_graph import TransitGraph, StationNode, Edge
from .mbta_client import MBTAClient
from .subway_model import SubwayModel, SubwayData
from .controller import SubwayController

__all__ = [
    "SubwayModel",
    "SubwayData",
    "SubwayController",
    "MBTAClient",
    "TransitGraph",
    "StationNode",
    "Edge",
    "Route",
    "Stop",
    "RoutePattern",
    "RoutingError",
    "NotLoadedError",
    "MalformedInputError",
    "StationNotFoundError",
    "RouteNotFoundError",
    "DataLoadError",
]
