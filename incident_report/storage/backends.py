"""Key-value settings backends holding string lists."""

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from incident_report.config.settings import Settings, settings as default_settings
from incident_report.errors import BackendIOFailure

logger = logging.getLogger(__name__)


class SettingsBackend(ABC):
    """Abstract key-value store mapping keys to ordered string lists.

    Implementations raise ``BackendIOFailure`` when a read or write does
    not complete.
    """

    name: str = "base"

    @abstractmethod
    async def get_list(self, key: str) -> list[str] | None:
        """Return the list stored at ``key``, or None if absent."""
        ...

    @abstractmethod
    async def set_list(self, key: str, values: list[str]) -> None:
        """Replace the list stored at ``key``."""
        ...

    async def close(self) -> None:
        """Release any held resources."""


class MemorySettingsBackend(SettingsBackend):
    """Process-local backend. Contents do not survive a restart."""

    name = "memory"

    def __init__(self, initial: dict[str, list[str]] | None = None) -> None:
        self._data: dict[str, list[str]] = {
            key: list(values) for key, values in (initial or {}).items()
        }

    async def get_list(self, key: str) -> list[str] | None:
        values = self._data.get(key)
        return list(values) if values is not None else None

    async def set_list(self, key: str, values: list[str]) -> None:
        self._data[key] = list(values)


class FileSettingsBackend(SettingsBackend):
    """JSON document on disk mapping keys to string lists.

    Writes land in a temporary file beside the target and are moved into
    place with ``os.replace``, so a reader sees either the old or the new
    document, never a partial one.
    """

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def get_list(self, key: str) -> list[str] | None:
        try:
            data = await asyncio.to_thread(self._read_all)
        except (OSError, ValueError) as e:
            logger.error(f"Settings read error for {key}: {e}")
            raise BackendIOFailure(f"Could not read {self.path}: {e}") from e

        values = data.get(key)
        if values is None:
            return None
        if not isinstance(values, list):
            raise BackendIOFailure(f"Value at {key!r} in {self.path} is not a list")
        return values

    def _replace_key(self, key: str, values: list[str]) -> None:
        data = self._read_all()
        data[key] = list(values)
        self._write_all(data)

    async def set_list(self, key: str, values: list[str]) -> None:
        try:
            await asyncio.to_thread(self._replace_key, key, values)
        except (OSError, ValueError) as e:
            logger.error(f"Settings write error for {key}: {e}")
            raise BackendIOFailure(f"Could not write {self.path}: {e}") from e
        logger.debug(f"Wrote {len(values)} values to {key} in {self.path}")


class RedisSettingsBackend(SettingsBackend):
    """Redis list per key, replaced inside a MULTI/EXEC transaction."""

    name = "redis"

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        self.url = url or default_settings.redis_url
        self.timeout = timeout if timeout is not None else default_settings.redis_timeout
        self._redis = client

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=self.timeout,
                socket_connect_timeout=self.timeout,
            )
            logger.info("Connected to Redis")

    async def close(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    async def get_list(self, key: str) -> list[str] | None:
        if not self._redis:
            await self.connect()

        try:
            if not await self._redis.exists(key):
                return None
            return list(await self._redis.lrange(key, 0, -1))
        except RedisError as e:
            logger.error(f"Redis read error for {key}: {e}")
            raise BackendIOFailure(f"Could not read {key} from Redis: {e}") from e

    async def set_list(self, key: str, values: list[str]) -> None:
        if not self._redis:
            await self.connect()

        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                if values:
                    pipe.rpush(key, *values)
                await pipe.execute()
        except RedisError as e:
            logger.error(f"Redis write error for {key}: {e}")
            raise BackendIOFailure(f"Could not write {key} to Redis: {e}") from e


def create_backend(config: Settings | None = None) -> SettingsBackend:
    """Build the backend selected in configuration."""
    config = config or default_settings

    if config.storage_backend == "memory":
        return MemorySettingsBackend()
    if config.storage_backend == "redis":
        return RedisSettingsBackend(url=config.redis_url, timeout=config.redis_timeout)
    return FileSettingsBackend(config.settings_path)
