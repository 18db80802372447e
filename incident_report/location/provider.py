"""Device location providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from incident_report.config.constants import LocationPermission
from incident_report.config.settings import Settings, settings as default_settings
from incident_report.errors import (
    LocationPermissionDenied,
    LocationPermissionDeniedForever,
    PositionUnavailable,
)

logger = logging.getLogger(__name__)


class LocationProvider(ABC):
    """Abstract source of the device's current coordinates."""

    name: str = "base"

    @abstractmethod
    async def check_permission(self) -> LocationPermission:
        """Return the current permission state without prompting."""
        ...

    @abstractmethod
    async def request_permission(self) -> LocationPermission:
        """Ask the user for permission and return the resulting state."""
        ...

    @abstractmethod
    async def get_position(self) -> tuple[float, float]:
        """Read ``(latitude, longitude)`` once permission is granted."""
        ...

    async def current_position(self) -> tuple[float, float]:
        """Ensure permission, then return the current coordinates.

        A denied permission is requested once more before giving up.

        Raises:
            LocationPermissionDenied: The user declined the request.
            LocationPermissionDeniedForever: Permission can only be changed
                from system settings.
            PositionUnavailable: No position could be determined.
        """
        permission = await self.check_permission()
        if permission == LocationPermission.DENIED:
            permission = await self.request_permission()
            if permission == LocationPermission.DENIED:
                raise LocationPermissionDenied("Location permission denied")
        if permission == LocationPermission.DENIED_FOREVER:
            raise LocationPermissionDeniedForever("Location permission permanently denied")

        return await self.get_position()


class FixedLocationProvider(LocationProvider):
    """Provider returning configured coordinates."""

    name = "fixed"

    def __init__(
        self,
        latitude: float,
        longitude: float,
        permission: LocationPermission = LocationPermission.GRANTED,
        granted_on_request: bool = False,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.permission = permission
        self.granted_on_request = granted_on_request

    async def check_permission(self) -> LocationPermission:
        return self.permission

    async def request_permission(self) -> LocationPermission:
        if self.permission == LocationPermission.DENIED and self.granted_on_request:
            self.permission = LocationPermission.GRANTED
        return self.permission

    async def get_position(self) -> tuple[float, float]:
        return self.latitude, self.longitude


class IPGeolocationProvider(LocationProvider):
    """Approximate position from an IP geolocation service.

    Expects a JSON body with ``lat`` and ``lon`` fields, as returned by
    ip-api.com. A ``"status": "fail"`` body is reported as unavailable.
    """

    name = "ip"

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or default_settings.geoip_url
        self.timeout = timeout if timeout is not None else default_settings.geoip_timeout
        self._transport = transport

    async def check_permission(self) -> LocationPermission:
        return LocationPermission.GRANTED

    async def request_permission(self) -> LocationPermission:
        return LocationPermission.GRANTED

    async def _fetch(self) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.json()

    async def get_position(self) -> tuple[float, float]:
        try:
            data = await self._fetch()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geolocation lookup failed: {e}")
            raise PositionUnavailable(f"Could not determine position: {e}") from e

        if not isinstance(data, dict) or data.get("status") == "fail":
            message = data.get("message", "unknown error") if isinstance(data, dict) else "bad response"
            raise PositionUnavailable(f"Geolocation service failed: {message}")

        try:
            return float(data["lat"]), float(data["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise PositionUnavailable(f"Geolocation response missing coordinates: {e}") from e


def create_location_provider(config: Settings | None = None) -> LocationProvider:
    """Build the location provider selected in configuration."""
    config = config or default_settings

    if config.location_provider == "fixed":
        return FixedLocationProvider(config.fixed_latitude, config.fixed_longitude)
    return IPGeolocationProvider(url=config.geoip_url, timeout=config.geoip_timeout)
