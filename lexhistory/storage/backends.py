"""Key-value backends for the history collection.

All three hold JSON values keyed by string and share the same failure
contract: I/O problems surface as ``StorageError``, values that cannot be
decoded as ``CorruptHistoryError``. None of them lock or version keys.
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

import orjson
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from lexhistory.config import Settings
from lexhistory.core.contracts import IKeyValueBackend, JSONValue
from lexhistory.errors import CorruptHistoryError, ErrorCode, StorageError
from lexhistory.observ import get_logger

logger = get_logger(__name__)


class MemoryBackend:
    """In-process backend.

    Values are kept encoded so callers never share mutable structures with
    the store. Pass the same ``data`` dict to several instances to model
    independent contexts sharing one storage area.
    """

    def __init__(self, data: Optional[dict[str, bytes]] = None):
        self._data = data if data is not None else {}

    async def get(self, key: str) -> Optional[JSONValue]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return orjson.loads(raw)

    async def set(self, key: str, value: JSONValue) -> None:
        self._data[key] = orjson.dumps(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def size(self, key: str) -> int:
        return len(self._data.get(key, b""))


class JsonFileBackend:
    """One JSON document per key inside a directory.

    Writes go to a temporary sibling first and are swapped in with
    ``os.replace``, so a reader sees either the old or the new collection.
    """

    def __init__(self, directory: Path):
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    async def get(self, key: str) -> Optional[JSONValue]:
        path = self._path(key)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError("get", key, str(e), code=ErrorCode.STORAGE_READ_FAILED) from e

        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise CorruptHistoryError(key, str(e), path=str(path)) from e

    async def set(self, key: str, value: JSONValue) -> None:
        path = self._path(key)
        data = orjson.dumps(value)
        try:
            await asyncio.to_thread(self._write_atomic, path, data)
        except OSError as e:
            raise StorageError("set", key, str(e)) from e

    async def remove(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._path(key).unlink, missing_ok=True)
        except OSError as e:
            raise StorageError("remove", key, str(e)) from e

    async def size(self, key: str) -> int:
        try:
            return (await asyncio.to_thread(self._path(key).stat)).st_size
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise StorageError("size", key, str(e), code=ErrorCode.STORAGE_READ_FAILED) from e

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_bytes(data)
        os.replace(tmp, path)


class RedisBackend:
    """Redis-backed storage, values stored as orjson-encoded strings.

    Key Format: <prefix><key>
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "lexhistory:",
        client: Optional[aioredis.Redis] = None
    ):
        self._redis_url = redis_url
        self._prefix = prefix
        self._redis: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        """Initialize Redis connection."""
        if self._redis is not None:
            return
        try:
            self._redis = aioredis.from_url(self._redis_url, decode_responses=False)
            await self._redis.ping()
            logger.info("redis_backend_connected", url=self._redis_url)
        except RedisError as e:
            self._redis = None
            raise StorageError(
                "connect", self._redis_url, str(e),
                code=ErrorCode.STORAGE_UNAVAILABLE
            ) from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("redis_backend_closed")

    async def _client(self) -> aioredis.Redis:
        if self._redis is None:
            await self.connect()
        return self._redis

    async def get(self, key: str) -> Optional[JSONValue]:
        try:
            raw = await (await self._client()).get(self._prefix + key)
        except RedisError as e:
            raise StorageError("get", key, str(e), code=ErrorCode.STORAGE_READ_FAILED) from e
        if raw is None:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise CorruptHistoryError(key, str(e)) from e

    async def set(self, key: str, value: JSONValue) -> None:
        try:
            await (await self._client()).set(self._prefix + key, orjson.dumps(value))
        except RedisError as e:
            raise StorageError("set", key, str(e)) from e

    async def remove(self, key: str) -> None:
        try:
            await (await self._client()).delete(self._prefix + key)
        except RedisError as e:
            raise StorageError("remove", key, str(e)) from e

    async def size(self, key: str) -> int:
        try:
            return await (await self._client()).strlen(self._prefix + key)
        except RedisError as e:
            raise StorageError("size", key, str(e), code=ErrorCode.STORAGE_READ_FAILED) from e


def build_backend(settings: Settings) -> IKeyValueBackend:
    """Create the backend selected by settings."""
    if settings.storage_backend == "memory":
        return MemoryBackend()
    if settings.storage_backend == "redis":
        return RedisBackend(redis_url=settings.redis_url)
    return JsonFileBackend(settings.data_dir)
