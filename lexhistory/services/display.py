"""List-view helpers: one-line summaries and storage usage."""

from typing import Optional

import orjson

from lexhistory.core import DictionaryEntry, HistoryEntry, UsageReport

_UNITS = ("B", "KB", "MB", "GB")


def display_text(entry: HistoryEntry) -> tuple[str, str]:
    """Primary and secondary text for a history row.

    Dictionary entries show the word and one IPA of the first meaning (the
    string itself, or the first IPA of the first non-empty variant).
    Sentences show their source text only.
    """
    translation = entry.translation
    if not isinstance(translation, DictionaryEntry):
        return translation.text, ""

    pronunciation = translation.meanings[0].pronunciation
    if isinstance(pronunciation, str):
        return translation.word, pronunciation

    for variant in pronunciation.values():
        if variant.ipa:
            return translation.word, variant.ipa[0]
    return translation.word, ""


def format_bytes(size: int) -> tuple[str, str]:
    """Human-readable (value, unit) with two decimals."""
    value = float(size)
    for unit in _UNITS[:-1]:
        if value < 1024:
            return f"{value:.2f}", unit
        value /= 1024
    return f"{value:.2f}", _UNITS[-1]


def entries_usage(entries: list[HistoryEntry]) -> Optional[UsageReport]:
    """Serialized size of the given entries, None when there are none."""
    if not entries:
        return None

    payload = orjson.dumps([
        entry.model_dump(mode="json", exclude_none=True) for entry in entries
    ])
    value, unit = format_bytes(len(payload))
    return UsageReport(
        entry_count=len(entries),
        size_bytes=len(payload),
        size_value=value,
        size_unit=unit,
    )
