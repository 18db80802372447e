"""Report constants and enumerations."""

from enum import Enum

# Settings backend key holding the ordered list of report tokens
DEFAULT_REPORTS_KEY = "reports"

# Field names of a serialized report, in emission order
REPORT_FIELDS = ("title", "description", "latitude", "longitude")

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)

MAP_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}"


class LocationPermission(str, Enum):
    """Device location permission states."""

    GRANTED = "granted"
    DENIED = "denied"  # May be requested again
    DENIED_FOREVER = "denied_forever"  # User must change it in system settings
