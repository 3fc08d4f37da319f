"""Text menu for querying the subway model."""

import logging
from typing import Callable, Dict, List

from .exceptions import (
    DataLoadError,
    MalformedInputError,
    NotLoadedError,
    RouteNotFoundError,
    StationNotFoundError,
)
from .subway_model import SubwayModel

logger = logging.getLogger(__name__)

COMMAND_INFO = """1: Reload the data from the MBTA server.
2: List the names of all subway routes.
3: List the subway route with the most stops.
4: List the subway route with the fewest stops.
5: List the subway transfer stops (the stops
   connecting multiple subway routes).
6: Find a route from one stop to another.
q: Quit the program."""

ACCESS_ERROR = "An unexpected error occurred when attempting to access the\nroute data. Please try again.\n"


def format_list(items: List[str]) -> str:
    """
    Join items for display.

    [] -> "<none>", ["a"] -> "a", ["a", "b"] -> "a and b",
    ["a", "b", "c"] -> "a, b, and c"
    """
    if not items:
        return "<none>"
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return ", ".join(items[:-1]) + f", and {items[-1]}"


class SubwayController:
    """Runs the interactive menu on top of a SubwayModel."""

    def __init__(
        self,
        model: SubwayModel,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self.model = model
        self.input_func = input_func
        self.output = output_func
        # Each handler returns whether the program should quit
        self.commands: Dict[str, Callable[[], bool]] = {
            "1": self.reload_data,
            "2": self.list_routes,
            "3": self.list_route_with_most_stops,
            "4": self.list_route_with_fewest_stops,
            "5": self.list_transfer_stops,
            "6": self.find_path,
            "q": self.quit,
        }

    def run(self) -> None:
        """Load route data, then read and execute commands until quit or end of input."""
        try:
            self.model.load_route_data()
        except (DataLoadError, MalformedInputError) as e:
            logger.error(f"Initial load failed: {e}")
            self.output("A fatal error occurred while attempting to load route data")
            self.output("from the MBTA server to initialize the program.\n")
            return

        self.output("Welcome to the MBTA subway routing program!")
        self.output("Subway route data has been successfully loaded.\n")

        should_quit = False
        while not should_quit:
            self.output("Please enter one of the following options (before the colon):")
            self.output(COMMAND_INFO + "\n")
            try:
                command = self.input_func("").strip().lower()
            except EOFError:
                self.output("A fatal error occurred while attempting to read input.\n")
                break

            handler = self.commands.get(command, self.invalid_command)
            self.output("")
            should_quit = handler()
            self.output("")

    def reload_data(self) -> bool:
        try:
            self.model.load_route_data()
            self.output("The route data was successfully reloaded.")
        except (DataLoadError, MalformedInputError) as e:
            logger.warning(f"Reload failed: {e}")
            self.output("An error occurred while attempting to load new route data.")
            self.output("The previously loaded data has been retained.\n")
        return False

    def list_routes(self) -> bool:
        try:
            names = [route.name for route in self.model.get_routes()]
        except NotLoadedError:
            self.output(ACCESS_ERROR)
            return False
        self.output("The names of all MBTA subway routes are:")
        self.output(format_list(names))
        return False

    def list_route_with_most_stops(self) -> bool:
        return self._show_extreme_route("most")

    def list_route_with_fewest_stops(self) -> bool:
        return self._show_extreme_route("fewest")

    def _show_extreme_route(self, label: str) -> bool:
        try:
            if label == "most":
                result = self.model.get_route_with_most_stops()
            else:
                result = self.model.get_route_with_fewest_stops()
        except NotLoadedError:
            self.output(ACCESS_ERROR)
            return False

        if result is None:
            self.output("The model has no subway routes.")
        else:
            route, num_stops = result
            self.output(f"The subway route with the {label} stops is: {route.name}")
            self.output(f"This route has {num_stops} stops.")
        return False

    def list_transfer_stops(self) -> bool:
        try:
            transfer_stops = self.model.get_transfer_stops()
        except (NotLoadedError, RouteNotFoundError):
            self.output(ACCESS_ERROR)
            return False

        if not transfer_stops:
            self.output("There are no subway transfer stops.")
            return False

        self.output("The subway transfer stops, followed by the routes they connect, are:\n")
        for stop_name, routes in transfer_stops.items():
            self.output(f"{stop_name}: {format_list([route.name for route in routes])}")
        return False

    def find_path(self) -> bool:
        try:
            self.output("Please enter the name of the stop to start from:")
            source_name = self.input_func("").strip()
            self.output("\nPlease enter the name of the destination stop:")
            dest_name = self.input_func("").strip()
        except EOFError:
            self.output("A fatal error occurred while attempting to read input.\n")
            return True

        if source_name.lower() == dest_name.lower():
            self.output("\nYou cannot get a route from a station to itself!")
            return False

        self.output("")
        try:
            path = self.model.find_path(source_name, dest_name)
        except StationNotFoundError:
            self.output("The stop names provided were not recognized.")
            return False
        except (NotLoadedError, RouteNotFoundError):
            self.output(ACCESS_ERROR)
            return False

        if path is None:
            self.output("A route between these stops could not be calculated.")
            return False

        current_route = None
        for route, stop_name in path:
            if current_route is None:
                self.output(source_name)
                self.output(f"~ Board a {route.name} train. ~")
            elif route != current_route:
                self.output(f"~ Transfer to a {route.name} train. ~")
            current_route = route
            self.output(f"  |\n  |\n  |\n{stop_name}")
        self.output("\nYou will have arrived at your destination!")
        return False

    def quit(self) -> bool:
        self.output("The program has terminated.")
        return True

    def invalid_command(self) -> bool:
        self.output("The option entered was not recognized.")
        return False
