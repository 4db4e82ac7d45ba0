"""Typed failures raised at the persistence boundary."""

from __future__ import annotations

from enum import Enum


class StorageErrorCode(str, Enum):
    """Why a persistence call failed."""

    STORAGE_UNAVAILABLE = "storage-unavailable"
    INVALID_JSON = "invalid-json"
    WRITE_FAILED = "write-failed"
    VERSION_UNSUPPORTED = "version-unsupported"


class StorageError(Exception):
    """A labelled persistence failure (``code`` + human-readable ``message``)."""

    def __init__(self, code: StorageErrorCode | str, message: str) -> None:
        super().__init__(message)
        self.code = StorageErrorCode(code)
        self.message = message

    def __repr__(self) -> str:
        return f"StorageError({self.code.value!r}, {self.message!r})"

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}
