"""Location lookup for new reports."""

from .provider import (
    FixedLocationProvider,
    IPGeolocationProvider,
    LocationProvider,
    create_location_provider,
)

__all__ = [
    "LocationProvider",
    "FixedLocationProvider",
    "IPGeolocationProvider",
    "create_location_provider",
]
