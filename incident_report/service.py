"""Form-level operations tying the store to location and map lookups."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from incident_report.config.settings import settings
from incident_report.errors import InvalidReport
from incident_report.location.provider import LocationProvider
from incident_report.maps import open_map
from incident_report.reports.models import Report
from incident_report.storage.repository import ReportStore

logger = logging.getLogger(__name__)


@dataclass
class SubmitResult:
    """Outcome of a form submission."""

    report: Report
    map_opened: bool = False


def validate_form(title: str | None, description: str | None) -> list[str]:
    """Return the form messages for empty fields."""
    errors = []
    if not title:
        errors.append("Enter a title")
    if not description:
        errors.append("Enter a description")
    return errors


def format_subtitle(report: Report) -> str:
    """List entry text: description followed by the coordinates."""
    return f"{report.description}\n({report.latitude}, {report.longitude})"


class ReportFormService:
    """Submit, open and delete reports on behalf of the form UI."""

    def __init__(
        self,
        store: ReportStore,
        location: LocationProvider,
        map_opener: Callable[[float, float], bool] = open_map,
        open_map_on_submit: bool | None = None,
    ) -> None:
        self.store = store
        self.location = location
        self.map_opener = map_opener
        self.open_map_on_submit = (
            settings.open_map_on_submit if open_map_on_submit is None else open_map_on_submit
        )

    async def submit(self, title: str, description: str) -> SubmitResult:
        """Locate the device and store a new report.

        Raises:
            InvalidReport: Title or description is empty.
            LocationError: Permission refused or no position available.
            BackendIOFailure: The report could not be persisted.
        """
        errors = validate_form(title, description)
        if errors:
            raise InvalidReport(errors)

        latitude, longitude = await self.location.current_position()
        report = await self.store.append(title, description, latitude, longitude)
        logger.info(f"Report submitted at ({latitude}, {longitude})")

        result = SubmitResult(report=report)
        if self.open_map_on_submit:
            result.map_opened = self.map_opener(latitude, longitude)
        return result

    def open_map_for(self, index: int) -> bool:
        """Open the stored report at ``index`` in the map viewer."""
        report = self.store.get(index)
        return self.map_opener(report.latitude, report.longitude)

    async def delete(self, index: int) -> Report:
        """Delete the report at ``index`` and return it."""
        report = self.store.get(index)
        await self.store.delete_at(index)
        logger.info(f"Report {index} deleted")
        return report
