"""Exceptions raised by the report store and its collaborators."""

from __future__ import annotations


class ReportStoreError(Exception):
    """Base exception for report store operations."""


class InvalidReport(ReportStoreError):
    """A submitted report violates a field constraint."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors) or "Invalid report")


class IndexOutOfRange(ReportStoreError):
    """A position outside the current report list was requested."""

    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"Report index {index} out of range for {length} reports")


class MalformedRecord(ReportStoreError):
    """A stored record cannot be decoded into a report."""


class BackendIOFailure(ReportStoreError):
    """The settings backend failed to read or write."""


class LocationError(Exception):
    """Base exception for location lookups."""


class LocationPermissionDenied(LocationError):
    pass


class LocationPermissionDeniedForever(LocationError):
    pass


class PositionUnavailable(LocationError):
    pass
