"""Incident Report - local incident reporting with geotagged records."""

__version__ = "1.0.0"
