"""Pytest configuration and fixtures."""

import pytest

from incident_report.errors import BackendIOFailure
from incident_report.location.provider import FixedLocationProvider
from incident_report.reports.models import Report
from incident_report.storage.backends import MemorySettingsBackend
from incident_report.storage.repository import ReportStore


class FlakyBackend(MemorySettingsBackend):
    """Memory backend whose reads or writes can be made to fail."""

    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    async def get_list(self, key):
        if self.fail_reads:
            raise BackendIOFailure("storage unavailable")
        return await super().get_list(key)

    async def set_list(self, key, values):
        if self.fail_writes:
            raise BackendIOFailure("storage unavailable")
        self.writes += 1
        await super().set_list(key, values)


@pytest.fixture
def backend():
    """Empty in-memory settings backend."""
    return FlakyBackend()


@pytest.fixture
def store(backend):
    """Report store over the in-memory backend."""
    return ReportStore(backend, key="test-reports")


@pytest.fixture
def sample_report():
    """A single well-formed report."""
    return Report(
        title="Fire",
        description="Smoke seen",
        latitude=12.34,
        longitude=56.78,
    )


@pytest.fixture
def location():
    """Location provider with permission already granted."""
    return FixedLocationProvider(12.34, 56.78)


@pytest.fixture
def map_calls():
    """Records map viewer launches."""
    return []


@pytest.fixture
def map_opener(map_calls):
    def opener(latitude, longitude):
        map_calls.append((latitude, longitude))
        return True

    return opener
