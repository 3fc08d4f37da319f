"""Interactive MBTA subway routing menu."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import mbtarouting
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mbtarouting.controller import SubwayController
from mbtarouting.subway_model import SubwayModel

# Set up logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def main():
    """Run the menu against the live MBTA API (set MBTA_API_KEY for higher rate limits)."""
    model = SubwayModel()
    controller = SubwayController(model)
    try:
        controller.run()
    finally:
        model.client.close()


if __name__ == "__main__":
    main()
