"""Report storage module."""

from .backends import (
    FileSettingsBackend,
    MemorySettingsBackend,
    RedisSettingsBackend,
    SettingsBackend,
    create_backend,
)
from .repository import ReportStore

__all__ = [
    "SettingsBackend",
    "MemorySettingsBackend",
    "FileSettingsBackend",
    "RedisSettingsBackend",
    "create_backend",
    "ReportStore",
]
