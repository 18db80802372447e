"""Repository holding the session's ordered list of reports."""

import logging
from collections.abc import Callable

from pydantic import ValidationError

from incident_report.config.settings import settings
from incident_report.errors import IndexOutOfRange, InvalidReport, MalformedRecord
from incident_report.reports.codec import decode_token, encode_token
from incident_report.reports.models import Report, ReportSubmission
from incident_report.storage.backends import SettingsBackend

logger = logging.getLogger(__name__)

ChangeListener = Callable[[tuple[Report, ...]], None]


class ReportStore:
    """In-memory report list kept in step with a settings backend.

    The whole list is stored under one key as an ordered list of tokens.
    Every mutation rewrites that list. The store has no internal locking:
    callers issuing operations from several tasks must serialize them.
    """

    def __init__(self, backend: SettingsBackend, key: str | None = None) -> None:
        self.backend = backend
        self._key = settings.reports_key if key is None else key
        self._reports: list[Report] = []
        self._listeners: list[ChangeListener] = []

    @property
    def key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._reports)

    def snapshot(self) -> tuple[Report, ...]:
        """Current reports in submission order."""
        return tuple(self._reports)

    def get(self, index: int) -> Report:
        """Report at ``index``; negative positions are rejected."""
        self._check_index(index)
        return self._reports[index]

    def subscribe(self, listener: ChangeListener) -> None:
        """Call ``listener`` with a fresh snapshot after each change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def load(self) -> None:
        """Replace the in-memory list with the backend's contents.

        Tokens that cannot be decoded are skipped and logged; the rest load
        in their stored order.
        """
        tokens = await self.backend.get_list(self._key) or []

        reports: list[Report] = []
        for position, token in enumerate(tokens):
            try:
                reports.append(decode_token(token))
            except MalformedRecord as e:
                logger.warning(f"Skipping malformed report at {self._key}[{position}]: {e}")

        self._reports = reports
        logger.info(f"Loaded {len(reports)} of {len(tokens)} reports from {self._key}")
        self._notify()

    async def append(
        self,
        title: str,
        description: str,
        latitude: float,
        longitude: float,
    ) -> Report:
        """Validate, append and persist a new report.

        Raises:
            InvalidReport: A field is empty or a coordinate is out of range.
                Nothing is stored.
            BackendIOFailure: The report was appended in memory but could
                not be persisted.
        """
        try:
            submission = ReportSubmission(
                title=title,
                description=description,
                latitude=latitude,
                longitude=longitude,
            )
        except ValidationError as e:
            raise InvalidReport(
                [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            ) from e

        report = submission.to_report()
        self._reports.append(report)
        try:
            await self.persist_all()
        finally:
            self._notify()
        return report

    async def delete_at(self, index: int) -> None:
        """Remove the report at ``index`` and persist.

        Raises:
            IndexOutOfRange: ``index`` is not in ``[0, len(self))``.
            BackendIOFailure: Removed in memory but not persisted.
        """
        self._check_index(index)
        del self._reports[index]
        try:
            await self.persist_all()
        finally:
            self._notify()

    async def persist_all(self) -> None:
        """Write every report, in order, to the backend."""
        tokens = [encode_token(report) for report in self._reports]
        await self.backend.set_list(self._key, tokens)
        logger.debug(f"Persisted {len(tokens)} reports to {self._key}")

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Report index must be an int, got {type(index).__name__}")
        if not 0 <= index < len(self._reports):
            raise IndexOutOfRange(index, len(self._reports))

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Report change listener failed")
