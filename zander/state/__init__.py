"""State engine: immutable model, pure tree/bookmark rules, coordinator, actions."""

from .actions import AppState
from .coordinator import AppStateModel, PersistenceCoordinator
from .defaults import create_default_state
from .domain import (
    UNSET,
    BookmarkUpdate,
    apply_bookmark_update,
    collect_category_ids,
    create_bookmark,
    get_effective_category_id_for_new_bookmark,
    normalize_url,
)
from .model import Bookmark, Category, ExportBundle, ExportMeta, State
from .selectors import get_current_category, get_visible_bookmarks, iter_categories
from .tree import (
    TreeChange,
    add_category,
    delete_category,
    find_category,
    move_category,
    remove_category,
    update_category,
)

__all__ = [
    "UNSET",
    "AppState",
    "AppStateModel",
    "Bookmark",
    "BookmarkUpdate",
    "Category",
    "ExportBundle",
    "ExportMeta",
    "PersistenceCoordinator",
    "State",
    "TreeChange",
    "add_category",
    "apply_bookmark_update",
    "collect_category_ids",
    "create_bookmark",
    "create_default_state",
    "delete_category",
    "find_category",
    "get_current_category",
    "get_effective_category_id_for_new_bookmark",
    "get_visible_bookmarks",
    "iter_categories",
    "move_category",
    "normalize_url",
    "remove_category",
    "update_category",
]
