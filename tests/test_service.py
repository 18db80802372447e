"""Tests for the report form service and map links."""

import webbrowser

import pytest

from incident_report.config.constants import LocationPermission
from incident_report.errors import (
    BackendIOFailure,
    IndexOutOfRange,
    InvalidReport,
    LocationPermissionDenied,
    LocationPermissionDeniedForever,
)
from incident_report.location.provider import FixedLocationProvider
from incident_report.maps import build_map_url, open_map
from incident_report.reports.models import Report
from incident_report.service import ReportFormService, format_subtitle, validate_form


@pytest.fixture
def service(store, location, map_opener):
    """Form service that opens the map after submit."""
    return ReportFormService(store, location, map_opener=map_opener, open_map_on_submit=True)


class TestMaps:
    """Tests for map links."""

    def test_build_map_url(self):
        """Test the search URL format."""
        assert build_map_url(12.34, 56.78) == (
            "https://www.google.com/maps/search/?api=1&query=12.34,56.78"
        )

    def test_build_map_url_negative(self):
        """Test negative coordinates."""
        assert build_map_url(-33.8688, -151.2093).endswith("query=-33.8688,-151.2093")

    def test_open_map(self):
        """Test the opener receives the URL."""
        urls = []

        assert open_map(1.5, 2.5, opener=lambda url: urls.append(url) or True) is True
        assert urls == [build_map_url(1.5, 2.5)]

    def test_open_map_unavailable(self):
        """Test no available viewer."""
        assert open_map(1.5, 2.5, opener=lambda url: False) is False

    def test_open_map_error(self):
        """Test a browser error is reported as not opened."""
        def opener(url):
            raise webbrowser.Error("no browser")

        assert open_map(1.5, 2.5, opener=opener) is False


class TestFormHelpers:
    """Tests for form helpers."""

    def test_validate_form(self):
        """Test empty field messages."""
        assert validate_form("", "") == ["Enter a title", "Enter a description"]
        assert validate_form("Fire", None) == ["Enter a description"]
        assert validate_form("Fire", "Smoke") == []

    def test_format_subtitle(self, sample_report):
        """Test list entry text."""
        assert format_subtitle(sample_report) == "Smoke seen\n(12.34, 56.78)"


class TestSubmit:
    """Tests for ReportFormService.submit."""

    @pytest.mark.asyncio
    async def test_submit(self, service, store, map_calls):
        """Test a successful submission."""
        result = await service.submit("Fire", "Smoke seen")

        expected = Report(title="Fire", description="Smoke seen", latitude=12.34, longitude=56.78)
        assert result.report == expected
        assert result.map_opened is True
        assert store.snapshot() == (expected,)
        assert map_calls == [(12.34, 56.78)]

    @pytest.mark.asyncio
    async def test_submit_without_map(self, store, location, map_opener, map_calls):
        """Test the map is not opened when disabled."""
        service = ReportFormService(store, location, map_opener=map_opener, open_map_on_submit=False)

        result = await service.submit("Fire", "Smoke seen")

        assert result.map_opened is False
        assert map_calls == []

    @pytest.mark.asyncio
    async def test_empty_fields(self, service, store, map_calls):
        """Test form messages for empty fields."""
        with pytest.raises(InvalidReport) as exc_info:
            await service.submit("", "Smoke seen")

        assert exc_info.value.errors == ["Enter a title"]
        assert store.snapshot() == ()
        assert map_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "permission,error",
        [
            (LocationPermission.DENIED, LocationPermissionDenied),
            (LocationPermission.DENIED_FOREVER, LocationPermissionDeniedForever),
        ],
    )
    async def test_permission_refused(self, store, map_opener, permission, error):
        """Test nothing is stored without a location."""
        service = ReportFormService(
            store, FixedLocationProvider(1.0, 2.0, permission=permission), map_opener=map_opener
        )

        with pytest.raises(error):
            await service.submit("Fire", "Smoke seen")

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_out_of_range_position(self, store, map_opener):
        """Test an impossible position from the provider is rejected."""
        service = ReportFormService(store, FixedLocationProvider(95.0, 2.0), map_opener=map_opener)

        with pytest.raises(InvalidReport):
            await service.submit("Fire", "Smoke seen")

    @pytest.mark.asyncio
    async def test_save_failure(self, service, store, backend, map_calls):
        """Test a save failure surfaces and keeps the report in memory."""
        backend.fail_writes = True

        with pytest.raises(BackendIOFailure):
            await service.submit("Fire", "Smoke seen")

        assert len(store) == 1
        assert map_calls == []


class TestListActions:
    """Tests for per-report actions."""

    @pytest.mark.asyncio
    async def test_open_map_for(self, store, location, map_opener, map_calls):
        """Test opening a stored report on the map."""
        service = ReportFormService(store, location, map_opener=map_opener, open_map_on_submit=False)
        await store.append("Flood", "Road under water", -1.25, 36.8)

        assert service.open_map_for(0) is True
        assert map_calls == [(-1.25, 36.8)]

    @pytest.mark.asyncio
    async def test_delete(self, service, store):
        """Test deleting returns the removed report."""
        await service.submit("Fire", "Smoke seen")
        await service.submit("Flood", "Road under water")

        deleted = await service.delete(0)

        assert deleted.title == "Fire"
        assert [r.title for r in store.snapshot()] == ["Flood"]

    @pytest.mark.asyncio
    async def test_delete_out_of_range(self, service):
        """Test deleting a missing report."""
        with pytest.raises(IndexOutOfRange):
            await service.delete(0)
