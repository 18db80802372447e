"""Configuration module for Incident Report."""

from .settings import Settings, get_settings, settings
from .constants import DEFAULT_REPORTS_KEY, LocationPermission

__all__ = ["Settings", "get_settings", "settings", "DEFAULT_REPORTS_KEY", "LocationPermission"]
