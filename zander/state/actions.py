"""Public mutation API for the bookmark organizer.

:class:`AppState` turns each named action into a pure ``State -> State``
updater and hands it to the :class:`PersistenceCoordinator`.  Every action
is a coroutine that resolves to the new snapshot once it has been saved.
Actions never raise for unknown ids; they degrade to no-ops or to the
documented fallback.  Only the persistence boundary raises
``StorageError``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ..constants import EXPORT_VERSION, SETTINGS_PAGES, VIEWS
from ..log import logger
from .coordinator import AppStateModel, PersistenceCoordinator
from .domain import (
    UNSET,
    BookmarkUpdate,
    UnsetType,
    apply_bookmark_update,
    check_bundle_version,
    create_bookmark,
    get_effective_category_id_for_new_bookmark,
    import_state,
)
from .model import Bookmark, ExportBundle, ExportMeta, State
from .selectors import get_visible_bookmarks
from .tree import (
    add_category,
    find_category,
    move_category,
    remove_category,
    resolve_selection,
    update_category,
)
from .utils import create_timestamp

if TYPE_CHECKING:
    from ..persistence.backend import PersistenceBackend


class AppState:
    """The application's state handle: one per backend, one per process.

    Tests and embedders construct as many independent instances as they
    need; nothing is shared between them.
    """

    def __init__(
        self, backend: PersistenceBackend, model: AppStateModel | None = None
    ) -> None:
        self.backend = backend
        self.coordinator = PersistenceCoordinator(backend, model)

    @property
    def model(self) -> AppStateModel:
        return self.coordinator.model

    @property
    def state(self) -> State | None:
        return self.coordinator.model.state

    def visible_bookmarks(self) -> tuple[Bookmark, ...]:
        if self.state is None:
            return ()
        return get_visible_bookmarks(self.state)

    # -- lifecycle ------------------------------------------------------------

    async def load_initial_state(self) -> State:
        return await self.coordinator.load_initial_state()

    async def reset_system(self) -> State:
        return await self.coordinator.reset_system()

    # -- navigation -----------------------------------------------------------

    async def set_current_category(self, category_id: str | None) -> State:
        """Select a category; an unknown id selects the first root instead."""

        def updater(current: State) -> State:
            selected = resolve_selection(current.categories, category_id)
            return replace(current, current_category_id=selected)

        return await self.coordinator.persist_and_set(updater)

    async def set_current_view(self, view_id: str) -> State:
        if view_id not in VIEWS:
            logger.debug("ignoring unknown view %r", view_id)
            return await self.load_initial_state()

        return await self.coordinator.persist_and_set(
            lambda current: replace(current, current_view=view_id)
        )

    async def set_current_settings_page(self, page_id: str | None) -> State:
        effective = page_id if page_id in SETTINGS_PAGES else None
        return await self.coordinator.persist_and_set(
            lambda current: replace(current, current_settings_page=effective)
        )

    async def set_landing_category(self, category_id: str | None) -> State:
        """Choose the category shown first; an unknown id clears the choice."""

        def updater(current: State) -> State:
            landing = category_id
            if landing is not None and not find_category(current.categories, landing):
                landing = None
            return replace(current, landing_category_id=landing)

        return await self.coordinator.persist_and_set(updater)

    # -- categories -----------------------------------------------------------

    async def add_category(
        self, parent_id: str | None = None, name: str | None = None
    ) -> State:
        def updater(current: State) -> State:
            change = add_category(current.categories, parent_id, name)
            return replace(current, categories=change.categories)

        return await self.coordinator.persist_and_set(updater)

    async def move_category(self, category_id: str, direction: str) -> State:
        def updater(current: State) -> State:
            change = move_category(current.categories, category_id, direction)
            if not change.changed:
                return current
            return replace(current, categories=change.categories)

        return await self.coordinator.persist_and_set(updater)

    async def delete_category(self, category_id: str) -> State:
        """Remove a category subtree together with every bookmark inside it."""
        return await self.coordinator.persist_and_set(
            lambda current: remove_category(current, category_id)
        )

    async def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
    ) -> State:
        def updater(current: State) -> State:
            change = update_category(
                current.categories, category_id, name=name, color=color
            )
            if not change.changed:
                return current
            return replace(current, categories=change.categories)

        return await self.coordinator.persist_and_set(updater)

    # -- bookmarks ------------------------------------------------------------

    async def add_bookmark(
        self,
        title: str,
        url: str,
        category_id: str | None = None,
        description: str | None = None,
    ) -> State:
        """File a new bookmark.

        The category is resolved with the usual fallback chain (explicit id,
        current selection, first root); with no categories at all the
        bookmark is filed under ``""``.
        """

        def updater(current: State) -> State:
            effective = get_effective_category_id_for_new_bookmark(
                explicit_category_id=category_id,
                current_category_id=current.current_category_id,
                categories=current.categories,
            )
            bookmark = create_bookmark(
                title=title,
                url=url,
                category_id=effective or "",
                description=description,
            )
            return replace(current, bookmarks=current.bookmarks + (bookmark,))

        return await self.coordinator.persist_and_set(updater)

    async def update_bookmark(
        self,
        bookmark_id: str,
        *,
        title: str | None | UnsetType = UNSET,
        url: str | None | UnsetType = UNSET,
        description: str | None | UnsetType = UNSET,
        category_id: str | None | UnsetType = UNSET,
    ) -> State:
        """Patch a bookmark.  Omitted fields are left alone.

        ``description=None`` removes the description.  A new category id is
        resolved through the same fallback chain as :meth:`add_bookmark`.
        """

        def updater(current: State) -> State:
            index = next(
                (i for i, b in enumerate(current.bookmarks) if b.id == bookmark_id),
                None,
            )
            if index is None:
                return current

            resolved_category: str | None | UnsetType = UNSET
            if category_id is not UNSET and category_id is not None:
                effective = get_effective_category_id_for_new_bookmark(
                    explicit_category_id=category_id,
                    current_category_id=current.current_category_id,
                    categories=current.categories,
                )
                if effective:
                    resolved_category = effective

            patch = BookmarkUpdate(
                title=title,
                url=url,
                description=description,
                category_id=resolved_category,
            )
            updated = apply_bookmark_update(current.bookmarks[index], patch)
            bookmarks = (
                current.bookmarks[:index] + (updated,) + current.bookmarks[index + 1 :]
            )
            return replace(current, bookmarks=bookmarks)

        return await self.coordinator.persist_and_set(updater)

    async def delete_bookmark(self, bookmark_id: str) -> State:
        def updater(current: State) -> State:
            bookmarks = tuple(b for b in current.bookmarks if b.id != bookmark_id)
            if len(bookmarks) == len(current.bookmarks):
                return current
            return replace(current, bookmarks=bookmarks)

        return await self.coordinator.persist_and_set(updater)

    # -- data -----------------------------------------------------------------

    async def export_data(self) -> ExportBundle:
        """Bundle the canonical state, or ask the backend if nothing is loaded."""
        if self.state is None:
            return await self.backend.export_data()
        return ExportBundle(
            version=EXPORT_VERSION,
            state=self.state,
            meta=ExportMeta(
                exported_at_stardate=create_timestamp(),
                source_backend=self.backend.name,
            ),
        )

    async def apply_export_bundle(self, bundle: ExportBundle) -> State:
        """Replace the state with a bundle's contents.

        The version is checked before anything is queued, so an unsupported
        bundle leaves the canonical state untouched.  Bookmarks pointing at
        categories the bundle does not contain are dropped.
        """
        check_bundle_version(bundle)
        incoming = bundle.state
        return await self.coordinator.persist_and_set(
            lambda current: import_state(current, incoming)
        )

    import_data = apply_export_bundle
