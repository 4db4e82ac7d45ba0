"""Read-side projections over a ``State`` snapshot."""

from __future__ import annotations

from collections.abc import Iterator

from .model import Bookmark, Category, State
from .tree import Forest, find_category
from .utils import collect_ids_for_category_tree


def get_visible_bookmarks(state: State) -> tuple[Bookmark, ...]:
    """Bookmarks filed anywhere under the selected category.

    With no selection, or a selection that no longer resolves to a node,
    every bookmark is visible.
    """
    current_id = state.current_category_id
    if not current_id:
        return state.bookmarks

    root = find_category(state.categories, current_id)
    if root is None:
        return state.bookmarks

    ids: set[str] = set()
    collect_ids_for_category_tree(root, ids)
    return tuple(b for b in state.bookmarks if b.category_id in ids)


def get_current_category(state: State) -> Category | None:
    if not state.current_category_id:
        return None
    return find_category(state.categories, state.current_category_id)


def iter_categories(
    categories: Forest, depth: int = 0
) -> Iterator[tuple[int, Category]]:
    """Yield ``(depth, category)`` pairs in document order."""
    for category in categories:
        yield depth, category
        yield from iter_categories(category.children, depth + 1)
