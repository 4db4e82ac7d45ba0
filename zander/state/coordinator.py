"""Owner of the canonical in-memory state and its write queue.

Lifecycle of the canonical snapshot: it is adopted once by
:meth:`PersistenceCoordinator.load_initial_state` (from the backend, or as
fresh defaults), replaced atomically by every :meth:`persist_and_set`, and
replaced wholesale by :meth:`reset_system`.  Only the coordinator assigns
``model.state``; everything else reads it or proposes pure updaters.

Mutations are two-phase.  *Publish* applies the updater to the latest
snapshot and makes the result canonical without yielding to the event
loop, so updaters run strictly in call order and never see a stale base.
*Persist* then saves that snapshot; saves are serialised behind one lock
and are the only step that can fail.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import StorageError
from ..log import logger
from .defaults import create_default_state
from .model import State

if TYPE_CHECKING:
    from ..persistence.backend import PersistenceBackend

Updater = Callable[[State], State]


@dataclass
class AppStateModel:
    """Observable handle on the canonical snapshot and startup status."""

    state: State | None = None
    is_ready: bool = False
    init_error: str | None = None
    init_error_code: str | None = None  # StorageErrorCode value, when typed


class PersistenceCoordinator:
    """Serialises state mutations and persists each one through *backend*."""

    def __init__(
        self, backend: PersistenceBackend, model: AppStateModel | None = None
    ) -> None:
        self.backend = backend
        self.model = model if model is not None else AppStateModel()
        self._init_task: asyncio.Task[State] | None = None
        self._save_lock: asyncio.Lock | None = None

    @property
    def save_lock(self) -> asyncio.Lock:
        # Created lazily so the lock belongs to the loop that first uses it.
        if self._save_lock is None:
            self._save_lock = asyncio.Lock()
        return self._save_lock

    # -- initialisation -------------------------------------------------------

    async def load_initial_state(self) -> State:
        """Return the canonical state, loading or seeding it on first use.

        Concurrent callers share a single in-flight load.  A failure is
        recorded on the model and re-raised; the next call tries again.
        A snapshot published while the load is in flight wins over the
        loaded one.
        """
        if self.model.state is not None:
            self.model.is_ready = True
            return self.model.state

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._init_task)

    async def _load(self) -> State:
        try:
            persisted = await self.backend.load_state()
            if persisted is not None:
                logger.debug("adopted persisted state from %s", self.backend.name)
                state = persisted
            else:
                state = create_default_state()
                async with self.save_lock:
                    if self.model.state is None:
                        await self.backend.save_state(state)
                        logger.debug("seeded default state in %s", self.backend.name)
        except Exception as exc:
            self.model.init_error = str(exc)
            self.model.init_error_code = (
                exc.code.value if isinstance(exc, StorageError) else None
            )
            self.model.is_ready = False
            self._init_task = None
            logger.error("failed to load initial state: %s", exc)
            raise

        if self.model.state is not None:
            # A mutation or reset published while the load was in flight.
            logger.debug("keeping state published during the initial load")
            state = self.model.state
        self.model.state = state
        self.model.is_ready = True
        self.model.init_error = None
        self.model.init_error_code = None
        return state

    # -- mutations ------------------------------------------------------------

    async def persist_and_set(self, updater: Updater) -> State:
        """Apply *updater*, publish the result, then save it.

        The new snapshot is canonical before the save starts and stays
        canonical if the save fails; the failure is raised to this caller
        only and later mutations proceed normally.
        """
        base = self.model.state
        if base is None:
            base = create_default_state()
        next_state = updater(base)
        self.model.state = next_state

        # asyncio.Lock wakes waiters in FIFO order, so saves land in the same
        # order the snapshots were published.
        async with self.save_lock:
            try:
                await self.backend.save_state(next_state)
            except Exception as exc:
                logger.warning("failed to persist state: %s", exc)
                raise
        return next_state

    async def reset_system(self) -> State:
        """Overwrite the canonical state with defaults and save them."""
        state = create_default_state()
        self.model.state = state
        self.model.is_ready = True
        await self.backend.save_state(state)
        logger.debug("reset state to defaults")
        return state
