"""External map viewer links."""

import logging
import webbrowser
from collections.abc import Callable

from incident_report.config.constants import MAP_SEARCH_URL

logger = logging.getLogger(__name__)


def build_map_url(latitude: float, longitude: float) -> str:
    """Google Maps search URL centred on the given coordinates."""
    return MAP_SEARCH_URL.format(lat=latitude, lng=longitude)


def open_map(
    latitude: float,
    longitude: float,
    opener: Callable[[str], bool] = webbrowser.open,
) -> bool:
    """Open the coordinates in an external map viewer.

    Returns False when no viewer could be launched.
    """
    url = build_map_url(latitude, longitude)
    try:
        opened = bool(opener(url))
    except webbrowser.Error as e:
        logger.warning(f"Could not open map {url}: {e}")
        return False

    if not opened:
        logger.warning(f"No viewer available for {url}")
    return opened
