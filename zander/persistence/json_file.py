"""Backend that keeps the state as a JSON file on disk."""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from ..constants import PROBE_KEY, STORAGE_KEY
from ..log import logger
from ._base import KeyValueBackend

T = TypeVar("T")


def key_filename(key: str) -> str:
    """Map a storage key onto a portable file name (``a:b`` -> ``a-b.json``)."""
    return re.sub(r"[^A-Za-z0-9._-]", "-", key) + ".json"


class JsonFileBackend(KeyValueBackend):
    """One pretty-printed JSON file per key inside *directory*.

    Writes go to a temporary sibling first and are moved into place with
    ``os.replace`` so a crash never leaves a half-written snapshot.  File
    I/O runs in a worker thread to keep the event loop free.
    """

    name = "json-file"
    indent = 2

    def __init__(self, directory: Path, key: str = STORAGE_KEY) -> None:
        super().__init__(key)
        self.directory = Path(directory)

    @property
    def path(self) -> Path:
        return self.path_for(self.key)

    def path_for(self, key: str) -> Path:
        return self.directory / key_filename(key)

    async def _run_io(self, fn: Callable[..., T], *args: object) -> T:
        return await asyncio.to_thread(fn, *args)

    # -- medium primitives ----------------------------------------------------

    def _probe(self) -> bool:
        self.directory.mkdir(parents=True, exist_ok=True)
        probe = self.directory / PROBE_KEY
        probe.write_text("ok", encoding="utf-8")
        probe.unlink()
        return True

    def _read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, payload: str) -> None:
        path = self.path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, path)
        except OSError:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("failed to remove temp file %s", tmp, exc_info=True)
            raise
