"""Shared fixtures: translation builders, a deterministic clock, stores."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from lexhistory.core import (
    DictionaryEntry,
    HistoryEntry,
    SentenceTranslation,
    parse_translation,
)
from lexhistory.errors import StorageError
from lexhistory.services import HistoryService
from lexhistory.storage import EntryStore, MemoryBackend

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Returns strictly increasing instants, one second apart."""

    def __init__(self, start: datetime = EPOCH):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class FailingBackend(MemoryBackend):
    """Memory backend whose writes (and optionally reads) fail."""

    def __init__(self, fail_reads: bool = False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = True

    async def get(self, key):
        if self.fail_reads:
            raise StorageError("get", key, "disk unplugged")
        return await super().get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise StorageError("set", key, "quota exceeded")
        await super().set(key, value)

    async def remove(self, key):
        if self.fail_writes:
            raise StorageError("remove", key, "quota exceeded")
        await super().remove(key)


class YieldingBackend(MemoryBackend):
    """Suspends after every read so concurrent callers interleave."""

    async def get(self, key):
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


def sentence(text="Good morning", translation="Chào buổi sáng", source="en", target="vi"):
    return SentenceTranslation(
        text=text,
        translation=translation,
        source_language_code=source,
        translated_language_code=target,
    )


def dictionary(word="run", source="en", target="vi", **overrides):
    data = {
        "word": word,
        "source_language_code": source,
        "translated_language_code": target,
        "verb_forms": ["ran", "running"],
        "meanings": [
            {
                "pronunciation": {
                    "UK": {"ipa": ["/rʌn/"], "tts_code": "en-GB"},
                    "US": {"ipa": ["/rʌn/", "/ɹʌn/"], "tts_code": "en-US"},
                },
                "part_of_speech": "verb",
                "definition": "chạy",
                "note": "irregular verb",
                "synonyms": {"label": "Synonyms", "items": ["sprint", "jog"]},
                "idioms": {
                    "label": "Idioms",
                    "items": [
                        {
                            "idiom": "run out of steam",
                            "meaning": "hết hơi",
                            "examples": [
                                {
                                    "text": "By noon the team had run out of steam.",
                                    "translation": "Đến trưa cả đội đã kiệt sức hoàn toàn.",
                                }
                            ],
                        }
                    ],
                },
                "phrasal_verbs": {
                    "label": "Phrasal verbs",
                    "items": [
                        {
                            "phrasal_verb": "run into",
                            "meaning": "tình cờ gặp",
                            "examples": [
                                {"text": "I ran into an old friend.", "translation": "Tôi tình cờ gặp một người bạn cũ."}
                            ],
                        }
                    ],
                },
                "examples": [
                    {"text": "She runs every morning.", "translation": "Cô ấy chạy mỗi sáng."}
                ],
            }
        ],
    }
    data.update(overrides)
    return parse_translation(data)


def make_entry(entry_id, timestamp, pinned_at=None, translation=None):
    """Entry with second offsets from EPOCH."""
    return HistoryEntry(
        id=entry_id,
        timestamp=EPOCH + timedelta(seconds=timestamp),
        pinned_at=None if pinned_at is None else EPOCH + timedelta(seconds=pinned_at),
        translation=translation or sentence(),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return EntryStore(backend)


@pytest.fixture
def service(store, clock):
    return HistoryService(store, clock=clock)
