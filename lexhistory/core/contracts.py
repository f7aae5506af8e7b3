"""Service contracts and interfaces.

Defines protocols for dependency injection and testing.
"""

from typing import Any, Optional, Protocol, runtime_checkable


# Anything json can represent
JSONValue = Any


@runtime_checkable
class IKeyValueBackend(Protocol):
    """Contract for the raw key-value storage the history lives in.

    One key holds the whole serialized collection as a JSON array. The
    backend is shared state: there is no locking or versioning, so two
    writers racing on the same key end with the later write.
    Implementations raise ``StorageError`` on I/O failure.
    """

    async def get(self, key: str) -> Optional[JSONValue]:
        """Return the stored JSON value, or None when absent."""
        ...

    async def set(self, key: str, value: JSONValue) -> None:
        """Overwrite the value under key."""
        ...

    async def remove(self, key: str) -> None:
        """Delete key; absent keys are not an error."""
        ...

    async def size(self, key: str) -> int:
        """Bytes used by the value under key (0 when absent)."""
        ...
