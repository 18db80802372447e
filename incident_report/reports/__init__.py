"""Report entity and serialization."""

from .models import Report, ReportSubmission
from .codec import decode_fields, decode_token, encode_fields, encode_token

__all__ = [
    "Report",
    "ReportSubmission",
    "encode_fields",
    "decode_fields",
    "encode_token",
    "decode_token",
]
