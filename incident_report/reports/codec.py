"""Conversion between reports, flat field mappings and storage tokens.

A token is the compact JSON text of a report's field mapping. One token is
stored per report in the settings backend's string list.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from incident_report.config.constants import REPORT_FIELDS
from incident_report.errors import MalformedRecord
from incident_report.reports.models import Report


def encode_fields(report: Report) -> dict[str, Any]:
    """Flatten a report into its four fields, numbers left numeric."""
    return {
        "title": report.title,
        "description": report.description,
        "latitude": report.latitude,
        "longitude": report.longitude,
    }


def decode_fields(data: Mapping[str, Any]) -> Report:
    """Build a report from a field mapping.

    Raises:
        MalformedRecord: If the input is not a mapping, a field is missing,
            or a field has the wrong type.
    """
    if not isinstance(data, Mapping):
        raise MalformedRecord(f"Expected a mapping, got {type(data).__name__}")

    missing = [name for name in REPORT_FIELDS if name not in data]
    if missing:
        raise MalformedRecord(f"Missing fields: {', '.join(missing)}")

    try:
        return Report.model_validate({name: data[name] for name in REPORT_FIELDS})
    except ValidationError as e:
        raise MalformedRecord(f"Invalid field types: {e}") from e


def encode_token(report: Report) -> str:
    """Serialize a report into a single storage token."""
    try:
        return json.dumps(
            encode_fields(report),
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except ValueError as e:
        # NaN and infinity have no JSON representation
        raise MalformedRecord(f"Report cannot be encoded: {e}") from e


def _reject_constant(name: str) -> Any:
    raise MalformedRecord(f"Token contains non-finite number {name}")


def decode_token(token: str) -> Report:
    """Parse a storage token back into a report.

    Raises:
        MalformedRecord: If the token is not valid JSON or does not hold a
            complete report.
    """
    if not isinstance(token, str):
        raise MalformedRecord(f"Expected a string token, got {type(token).__name__}")

    try:
        data = json.loads(token, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MalformedRecord(f"Token is not valid JSON: {e}") from e

    return decode_fields(data)
