"""The narrow contract the state engine uses to reach durable storage."""

from __future__ import annotations

from typing import Protocol

from ..state.model import ExportBundle, State


class PersistenceBackend(Protocol):
    """Durable load/save of whole ``State`` snapshots.

    Failures are raised as ``StorageError``:

    * ``load_state``: ``storage-unavailable``, ``invalid-json``
    * ``save_state``: ``storage-unavailable``, ``write-failed``
    * ``import_data``: ``version-unsupported`` (before anything is written)
    """

    name: str

    async def load_state(self) -> State | None: ...
    async def save_state(self, state: State) -> None: ...
    async def export_data(self) -> ExportBundle: ...
    async def import_data(self, bundle: ExportBundle) -> None: ...
