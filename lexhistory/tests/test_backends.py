"""Tests for the key-value backends."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from lexhistory.config import Settings
from lexhistory.errors import CorruptHistoryError, ErrorCode, StorageError
from lexhistory.storage import JsonFileBackend, MemoryBackend, RedisBackend, build_backend


class TestMemoryBackend:

    async def test_get_set_remove(self):
        backend = MemoryBackend()
        assert await backend.get("k") is None
        await backend.set("k", [1, {"a": "b"}])
        assert await backend.get("k") == [1, {"a": "b"}]
        await backend.remove("k")
        assert await backend.get("k") is None

    async def test_values_are_copies(self):
        backend = MemoryBackend()
        value = [{"id": "a"}]
        await backend.set("k", value)
        value.append({"id": "b"})
        loaded = await backend.get("k")
        loaded.append({"id": "c"})
        assert await backend.get("k") == [{"id": "a"}]

    async def test_shared_area(self):
        area = {}
        await MemoryBackend(area).set("k", [1])
        assert await MemoryBackend(area).get("k") == [1]

    async def test_remove_missing(self):
        await MemoryBackend().remove("nothing")


class TestJsonFileBackend:

    async def test_round_trip(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "nested")
        await backend.set("history", [{"text": "Chào"}])
        assert await backend.get("history") == [{"text": "Chào"}]
        assert (tmp_path / "nested" / "history.json").exists()
        assert await backend.size("history") > 0

    async def test_absent(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        assert await backend.get("history") is None
        assert await backend.size("history") == 0
        await backend.remove("history")

    async def test_no_temporary_left_behind(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        await backend.set("history", [])
        assert [p.name for p in tmp_path.iterdir()] == ["history.json"]

    async def test_undecodable(self, tmp_path):
        (tmp_path / "history.json").write_bytes(b"not json")
        with pytest.raises(CorruptHistoryError):
            await JsonFileBackend(tmp_path).get("history")

    async def test_write_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(StorageError) as exc_info:
            await JsonFileBackend(blocker / "sub").set("history", [])
        assert exc_info.value.code == ErrorCode.STORAGE_WRITE_FAILED


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the backend."""

    def __init__(self, fail: bool = False):
        self.data = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        self.data[key] = value

    async def delete(self, key):
        self._check()
        self.data.pop(key, None)

    async def strlen(self, key):
        self._check()
        return len(self.data.get(key, b""))


class TestRedisBackend:

    async def test_round_trip_with_prefix(self):
        client = FakeRedis()
        backend = RedisBackend(client=client, prefix="test:")
        await backend.set("history", [{"id": "a"}])
        assert list(client.data) == ["test:history"]
        assert await backend.get("history") == [{"id": "a"}]
        assert await backend.size("history") == len(client.data["test:history"])
        await backend.remove("history")
        assert await backend.get("history") is None

    async def test_errors_become_storage_errors(self):
        backend = RedisBackend(client=FakeRedis(fail=True))
        with pytest.raises(StorageError) as exc_info:
            await backend.get("history")
        assert exc_info.value.code == ErrorCode.STORAGE_READ_FAILED
        with pytest.raises(StorageError):
            await backend.set("history", [])

    async def test_undecodable(self):
        client = FakeRedis()
        client.data["lexhistory:history"] = b"{broken"
        with pytest.raises(CorruptHistoryError):
            await RedisBackend(client=client).get("history")


class TestBuildBackend:

    def test_memory(self):
        assert isinstance(build_backend(Settings(storage_backend="memory")), MemoryBackend)

    def test_file(self, tmp_path):
        assert isinstance(build_backend(Settings(storage_backend="file", data_dir=tmp_path)), JsonFileBackend)

    def test_redis(self):
        assert isinstance(build_backend(Settings(storage_backend="redis")), RedisBackend)
