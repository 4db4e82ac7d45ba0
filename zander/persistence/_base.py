"""Base backend for string key/value storage media."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TypeVar

from ..constants import EXPORT_VERSION, STORAGE_KEY
from ..errors import StorageError, StorageErrorCode
from ..log import logger
from ..state.defaults import create_default_state
from ..state.domain import check_bundle_version
from ..state.model import ExportBundle, ExportMeta, State
from ..state.utils import create_timestamp

T = TypeVar("T")


class KeyValueBackend:
    """Stores the state snapshot as a JSON string under one fixed key.

    Subclasses supply the medium through ``_probe()``, ``_read()`` and
    ``_write()``; those may raise ``OSError``, which is translated into the
    matching ``StorageError`` here.  ``_run_io()`` decides where the
    blocking primitives execute.
    """

    name = "key-value"
    indent: int | None = None

    def __init__(self, key: str = STORAGE_KEY) -> None:
        self.key = key

    # -- backend contract -----------------------------------------------------

    async def load_state(self) -> State | None:
        return await self._run_io(self._load_sync)

    async def save_state(self, state: State) -> None:
        await self._run_io(self._save_sync, state)

    async def export_data(self) -> ExportBundle:
        """Wrap the persisted state (or the defaults) in a versioned bundle."""
        state = await self.load_state()
        return ExportBundle(
            version=EXPORT_VERSION,
            state=state if state is not None else create_default_state(),
            meta=ExportMeta(
                exported_at_stardate=create_timestamp(),
                source_backend=self.name,
            ),
        )

    async def import_data(self, bundle: ExportBundle) -> None:
        check_bundle_version(bundle)
        await self.save_state(bundle.state)

    # -- core I/O -------------------------------------------------------------

    def _load_sync(self) -> State | None:
        self._ensure_available()
        try:
            raw = self._read(self.key)
        except UnicodeDecodeError as exc:
            raise StorageError(
                StorageErrorCode.INVALID_JSON,
                f"Stored state under {self.key!r} is not valid UTF-8: {exc}",
            ) from exc
        except OSError as exc:
            raise StorageError(
                StorageErrorCode.STORAGE_UNAVAILABLE,
                f"Could not read {self.name} storage: {exc}",
            ) from exc
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(
                StorageErrorCode.INVALID_JSON,
                f"Stored state under {self.key!r} is not valid JSON: {exc}",
            ) from exc
        return State.from_dict(data)

    def _save_sync(self, state: State) -> None:
        self._ensure_available()
        payload = json.dumps(state.to_dict(), indent=self.indent, ensure_ascii=False)
        try:
            self._write(self.key, payload)
        except OSError as exc:
            raise StorageError(
                StorageErrorCode.WRITE_FAILED,
                f"Could not write state to {self.name} storage: {exc}",
            ) from exc
        logger.debug("saved state under %r (%d bytes)", self.key, len(payload))

    def _ensure_available(self) -> None:
        try:
            available = self._probe()
        except OSError:
            logger.debug("%s storage probe failed", self.name, exc_info=True)
            available = False
        if not available:
            raise StorageError(
                StorageErrorCode.STORAGE_UNAVAILABLE,
                f"{self.name} storage is not available",
            )

    async def _run_io(self, fn: Callable[..., T], *args: object) -> T:
        return fn(*args)

    # -- override points ------------------------------------------------------

    def _probe(self) -> bool:
        """Return True when the medium accepts a throwaway write."""
        raise NotImplementedError

    def _read(self, key: str) -> str | None:
        raise NotImplementedError

    def _write(self, key: str, payload: str) -> None:
        raise NotImplementedError

