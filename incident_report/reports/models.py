"""Pydantic models for incident reports."""

from pydantic import BaseModel, ConfigDict, Field

from incident_report.config.constants import LATITUDE_RANGE, LONGITUDE_RANGE


class Report(BaseModel):
    """One incident record.

    Immutable after construction. Only field types and finite coordinates
    are enforced here; content rules (non-empty text, coordinate ranges)
    are checked by ``ReportSubmission`` before a report enters the store.
    """

    model_config = ConfigDict(frozen=True, strict=True, allow_inf_nan=False)

    title: str
    description: str
    latitude: float
    longitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        return self.latitude, self.longitude


class ReportSubmission(BaseModel):
    """Form input for a new report."""

    model_config = ConfigDict(strict=True)

    title: str = Field(min_length=1, description="Incident title")
    description: str = Field(min_length=1, description="Incident description")
    latitude: float = Field(
        ge=LATITUDE_RANGE[0], le=LATITUDE_RANGE[1], allow_inf_nan=False
    )
    longitude: float = Field(
        ge=LONGITUDE_RANGE[0], le=LONGITUDE_RANGE[1], allow_inf_nan=False
    )

    def to_report(self) -> Report:
        return Report(
            title=self.title,
            description=self.description,
            latitude=self.latitude,
            longitude=self.longitude,
        )
