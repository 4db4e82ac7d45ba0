"""In-process backend over a plain mapping."""

from __future__ import annotations

from collections.abc import MutableMapping

from ..constants import PROBE_KEY, STORAGE_KEY
from ..errors import StorageError, StorageErrorCode
from ._base import KeyValueBackend


class MemoryBackend(KeyValueBackend):
    """Keeps the serialised state in an injected ``{key: json_text}`` mapping.

    Passing ``storage=None`` models a medium that does not exist at all:
    every load and save then fails with ``storage-unavailable``.  Mapping
    implementations may raise ``OSError`` to simulate a full or read-only
    medium.
    """

    name = "memory"

    def __init__(
        self,
        storage: MutableMapping[str, str] | None,
        key: str = STORAGE_KEY,
    ) -> None:
        super().__init__(key)
        self.storage = storage

    def _medium(self) -> MutableMapping[str, str]:
        if self.storage is None:
            raise StorageError(
                StorageErrorCode.STORAGE_UNAVAILABLE,
                f"{self.name} storage is not available",
            )
        return self.storage

    def _probe(self) -> bool:
        if self.storage is None:
            return False
        self.storage[PROBE_KEY] = "ok"
        del self.storage[PROBE_KEY]
        return True

    def _read(self, key: str) -> str | None:
        return self._medium().get(key)

    def _write(self, key: str, payload: str) -> None:
        self._medium()[key] = payload
