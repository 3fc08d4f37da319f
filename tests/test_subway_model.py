"""Tests for SubwayModel."""

import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add src to path so we can import mbtarouting
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from mbtarouting.exceptions import (
    DataLoadError,
    MalformedInputError,
    NotLoadedError,
    RouteNotFoundError,
    StationNotFoundError,
)
from mbtarouting.mbta_client import MBTAClient
from mbtarouting.models import Route, RoutePattern, Stop
from mbtarouting.subway_model import SubwayModel
from subway_fixtures import MATTAPAN, ORANGE, RED, THREE_ROUTES, three_route_patterns


def mock_client(routes, patterns):
    client = MagicMock(spec=MBTAClient)
    client.get_subway_routes.return_value = routes
    client.get_canonical_route_patterns.return_value = patterns
    return client


class TestNotLoaded(unittest.TestCase):
    """Test every query fails before the first successful load."""

    def setUp(self):
        self.model = SubwayModel(mock_client([], []))

    def test_queries_raise(self):
        with self.assertRaises(NotLoadedError):
            self.model.get_routes()
        with self.assertRaises(NotLoadedError):
            self.model.get_route_with_most_stops()
        with self.assertRaises(NotLoadedError):
            self.model.get_route_with_fewest_stops()
        with self.assertRaises(NotLoadedError):
            self.model.get_transfer_stops()
        with self.assertRaises(NotLoadedError):
            self.model.find_path("Ashmont", "Mattapan")
        self.assertFalse(self.model.is_loaded)

    def test_not_loaded_is_runtime_error(self):
        with self.assertRaises(RuntimeError):
            self.model.get_routes()


class TestLoadRouteData(unittest.TestCase):
    """Test loading and reloading route data."""

    def test_requests_patterns_for_loaded_routes(self):
        client = mock_client(THREE_ROUTES, three_route_patterns())
        model = SubwayModel(client)

        model.load_route_data()

        client.get_canonical_route_patterns.assert_called_once_with(["Red", "Mattapan", "Orange"])
        self.assertEqual(model.get_routes(), THREE_ROUTES)
        self.assertTrue(model.is_loaded)

    def test_get_routes_does_not_consume_data(self):
        model = SubwayModel(mock_client(THREE_ROUTES, three_route_patterns()))
        model.load_route_data()

        for _ in range(2):
            self.assertEqual(model.get_routes(), [RED, MATTAPAN, ORANGE])

    def test_reload_replaces_data(self):
        client = mock_client([], [])
        model = SubwayModel(client)

        model.load_route_data()
        self.assertEqual(model.get_routes(), [])
        self.assertEqual(model.get_transfer_stops(), {})

        client.get_subway_routes.return_value = THREE_ROUTES
        client.get_canonical_route_patterns.return_value = three_route_patterns()
        model.load_route_data()

        self.assertEqual(model.get_routes(), THREE_ROUTES)
        self.assertEqual(model.get_route_with_most_stops(), (RED, 9))

    def test_failed_load_before_success(self):
        client = mock_client(THREE_ROUTES, [])
        client.get_subway_routes.side_effect = DataLoadError("malformed")
        model = SubwayModel(client)

        with self.assertRaises(DataLoadError):
            model.load_route_data()
        with self.assertRaises(NotLoadedError):
            model.get_routes()

    def test_failed_reload_keeps_previous_data(self):
        """Test a rate-limited reload leaves the previous generation untouched."""
        client = mock_client(THREE_ROUTES, three_route_patterns())
        model = SubwayModel(client)
        model.load_route_data()
        transfer_stops = model.get_transfer_stops()

        client.get_subway_routes.return_value = [Route("Blue", "Blue Line")]
        client.get_canonical_route_patterns.side_effect = DataLoadError("rate limited")

        with self.assertRaises(DataLoadError):
            model.load_route_data()

        self.assertEqual(model.get_routes(), THREE_ROUTES)
        self.assertEqual(model.get_transfer_stops(), transfer_stops)
        self.assertEqual(model.get_route_with_fewest_stops(), (ORANGE, 6))

    def test_malformed_patterns_keep_previous_data(self):
        client = mock_client(THREE_ROUTES, three_route_patterns())
        model = SubwayModel(client)
        model.load_route_data()

        client.get_canonical_route_patterns.return_value = [RoutePattern("bad", "Red", None)]

        with self.assertRaises(MalformedInputError):
            model.load_route_data()
        self.assertEqual(model.get_routes(), THREE_ROUTES)


class TestStopCounts(unittest.TestCase):
    """Test the routes with the most and fewest stops."""

    def test_no_routes(self):
        model = SubwayModel(mock_client([], []))
        model.load_route_data()

        self.assertIsNone(model.get_route_with_most_stops())
        self.assertIsNone(model.get_route_with_fewest_stops())

    def test_single_route(self):
        patterns = [
            RoutePattern(
                "Red-0",
                "Red",
                [Stop("a", "Alewife"), Stop("d1", "Davis", Stop("d", "Davis")), Stop("d2", "Davis", Stop("d", "Davis"))],
            )
        ]
        model = SubwayModel(mock_client([RED], patterns))
        model.load_route_data()

        self.assertEqual(model.get_route_with_most_stops(), (RED, 2))
        self.assertEqual(model.get_route_with_fewest_stops(), (RED, 2))

    def test_three_routes(self):
        model = SubwayModel(mock_client(THREE_ROUTES, three_route_patterns()))
        model.load_route_data()

        self.assertEqual(model.get_route_with_most_stops(), (RED, 9))
        self.assertEqual(model.get_route_with_fewest_stops(), (ORANGE, 6))

    def test_route_without_patterns_counts_zero(self):
        blue = Route("Blue", "Blue Line")
        model = SubwayModel(mock_client(THREE_ROUTES + [blue], three_route_patterns()))
        model.load_route_data()

        self.assertEqual(model.get_route_with_fewest_stops(), (blue, 0))

    def test_ties_go_to_smallest_route_id(self):
        routes = [Route("Orange", "Orange Line"), Route("Blue", "Blue Line"), Route("Green-B", "Green Line B")]
        patterns = [
            RoutePattern("o", "Orange", [Stop("1", "One"), Stop("2", "Two")]),
            RoutePattern("b", "Blue", [Stop("3", "Three"), Stop("4", "Four")]),
            RoutePattern("g", "Green-B", [Stop("5", "Five")]),
        ]
        model = SubwayModel(mock_client(routes, patterns))
        model.load_route_data()

        self.assertEqual(model.get_route_with_most_stops(), (routes[1], 2))
        self.assertEqual(model.get_route_with_fewest_stops(), (routes[2], 1))


class TestTransferStops(unittest.TestCase):
    """Test listing stations that connect multiple routes."""

    def test_three_routes(self):
        model = SubwayModel(mock_client(THREE_ROUTES, three_route_patterns()))
        model.load_route_data()

        self.assertEqual(
            model.get_transfer_stops(),
            {
                "Downtown Crossing": [RED, ORANGE],
                "Ashmont": [RED, MATTAPAN],
            },
        )

    def test_duplicate_names_last_wins(self):
        routes = [RED, ORANGE, MATTAPAN]
        patterns = [
            RoutePattern("r", "Red", [Stop("s1", "Central")]),
            RoutePattern("o", "Orange", [Stop("s1", "Central")]),
            RoutePattern("m", "Mattapan", [Stop("s2", "Central")]),
            RoutePattern("r2", "Red", [Stop("s2", "Central")]),
        ]
        model = SubwayModel(mock_client(routes, patterns))
        model.load_route_data()

        self.assertEqual(model.get_transfer_stops(), {"Central": [MATTAPAN, RED]})

    def test_unknown_route_id(self):
        patterns = [
            RoutePattern("r", "Red", [Stop("s1", "Central")]),
            RoutePattern("x", "Shuttle-Red", [Stop("s1", "Central")]),
        ]
        model = SubwayModel(mock_client([RED], patterns))
        model.load_route_data()

        with self.assertRaises(RouteNotFoundError):
            model.get_transfer_stops()


class TestFindPath(unittest.TestCase):
    """Test path finding through the model."""

    def setUp(self):
        self.model = SubwayModel(mock_client(THREE_ROUTES, three_route_patterns()))
        self.model.load_route_data()

    def test_path_uses_route_objects(self):
        path = self.model.find_path("Shawmut", "Butler")
        self.assertEqual(
            path,
            [(RED, "Ashmont"), (MATTAPAN, "Cedar Grove"), (MATTAPAN, "Butler")],
        )
        self.assertEqual(path[0][0].name, "Red Line")

    def test_same_station(self):
        self.assertIsNone(self.model.find_path("Ashmont", "ashmont"))

    def test_unknown_station(self):
        with self.assertRaises(StationNotFoundError):
            self.model.find_path("Nonexistent", "Ruggles")

    def test_route_not_loaded(self):
        model = SubwayModel(mock_client([RED], [RoutePattern("x", "Shuttle", [Stop("1", "A"), Stop("2", "B")])]))
        model.load_route_data()

        with self.assertRaises(RouteNotFoundError) as ctx:
            model.find_path("A", "B")
        self.assertEqual(ctx.exception.route_id, "Shuttle")


if __name__ == "__main__":
    unittest.main()
