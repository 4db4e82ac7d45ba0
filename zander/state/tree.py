"""Pure operations on the category forest.

Each operation takes the forest (a tuple of root categories) and returns a
:class:`TreeChange`.  Nodes on the path to the edit are rebuilt; every
other subtree is reused by reference, and a no-op returns the input tuple
itself.  Searches are depth-first in document order at any nesting depth.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from ..constants import (
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_CATEGORY_NAME,
    MOVE_DIRECTIONS,
    MOVE_UP,
)
from .model import Category, State
from .utils import (
    collect_ids_for_category_tree,
    create_timestamp,
    first_root_id,
    generate_id,
)

Forest = tuple[Category, ...]


@dataclass(frozen=True)
class TreeChange:
    """Result of a tree operation."""

    categories: Forest
    changed: bool = False
    removed_ids: frozenset[str] = frozenset()
    category: Category | None = None  # the node that was added or updated


def find_category(categories: Forest, category_id: str) -> Category | None:
    for category in categories:
        if category.id == category_id:
            return category
        found = find_category(category.children, category_id)
        if found is not None:
            return found
    return None


def _replace_at(categories: Forest, index: int, node: Category) -> Forest:
    return categories[:index] + (node,) + categories[index + 1 :]


# -- add ----------------------------------------------------------------------


def _insert_into(
    categories: Forest, parent_id: str, new_category: Category
) -> tuple[Forest, bool]:
    for index, category in enumerate(categories):
        if category.id == parent_id:
            parent = replace(category, children=category.children + (new_category,))
            return _replace_at(categories, index, parent), True
        children, inserted = _insert_into(category.children, parent_id, new_category)
        if inserted:
            nested = replace(category, children=children)
            return _replace_at(categories, index, nested), True
    return categories, False


def add_category(
    categories: Forest,
    parent_id: str | None = None,
    name: str | None = None,
    *,
    color: str = DEFAULT_CATEGORY_COLOR,
    generate_id: Callable[[], str] = generate_id,
    create_timestamp: Callable[[], str] = create_timestamp,
) -> TreeChange:
    """Append a new category under *parent_id*, or as a root.

    An unknown *parent_id* appends the category as a new root rather than
    dropping it.
    """
    new_category = Category(
        id=generate_id(),
        name=name if name is not None else DEFAULT_CATEGORY_NAME,
        color=color,
        created_at=create_timestamp(),
    )

    if parent_id:
        nxt, inserted = _insert_into(categories, parent_id, new_category)
        if inserted:
            return TreeChange(nxt, changed=True, category=new_category)

    return TreeChange(
        categories + (new_category,), changed=True, category=new_category
    )


# -- move ---------------------------------------------------------------------


def _move_in_list(
    categories: Forest, category_id: str, direction: str
) -> tuple[Forest, bool]:
    for index, category in enumerate(categories):
        if category.id != category_id:
            continue
        target = index - 1 if direction == MOVE_UP else index + 1
        if target < 0 or target >= len(categories):
            return categories, False
        swapped = list(categories)
        swapped[target], swapped[index] = swapped[index], swapped[target]
        return tuple(swapped), True

    for index, category in enumerate(categories):
        children, moved = _move_in_list(category.children, category_id, direction)
        if moved:
            nested = replace(category, children=children)
            return _replace_at(categories, index, nested), True
    return categories, False


def move_category(categories: Forest, category_id: str, direction: str) -> TreeChange:
    """Swap *category_id* with its previous (``"up"``) or next sibling.

    Unknown ids, unknown directions and moves past either end of the
    sibling list leave the forest untouched.
    """
    if direction not in MOVE_DIRECTIONS:
        return TreeChange(categories)
    nxt, moved = _move_in_list(categories, category_id, direction)
    return TreeChange(nxt, changed=moved)


# -- delete -------------------------------------------------------------------


def _delete_from_list(
    categories: Forest, category_id: str
) -> tuple[Forest, set[str], bool]:
    for index, category in enumerate(categories):
        if category.id == category_id:
            removed: set[str] = set()
            collect_ids_for_category_tree(category, removed)
            return categories[:index] + categories[index + 1 :], removed, True
        children, removed, found = _delete_from_list(category.children, category_id)
        if found:
            pruned = replace(category, children=children)
            return _replace_at(categories, index, pruned), removed, True
    return categories, set(), False


def delete_category(categories: Forest, category_id: str) -> TreeChange:
    """Remove *category_id* and its whole subtree; report the removed ids."""
    nxt, removed, found = _delete_from_list(categories, category_id)
    if not found:
        return TreeChange(categories)
    return TreeChange(nxt, changed=True, removed_ids=frozenset(removed))


# -- update -------------------------------------------------------------------


def update_category(
    categories: Forest,
    category_id: str,
    *,
    name: str | None = None,
    color: str | None = None,
) -> TreeChange:
    """Rename and/or recolour a category; ``None`` keeps the current value."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if color is not None:
        changes["color"] = color

    def walk(nodes: Forest) -> tuple[Forest, Category | None]:
        for index, node in enumerate(nodes):
            if node.id == category_id:
                updated = replace(node, **changes) if changes else node
                return _replace_at(nodes, index, updated), updated
            children, updated = walk(node.children)
            if updated is not None:
                nested = replace(node, children=children)
                return _replace_at(nodes, index, nested), updated
        return nodes, None

    if not changes:
        found = find_category(categories, category_id)
        return TreeChange(categories, category=found)
    nxt, updated = walk(categories)
    if updated is None:
        return TreeChange(categories)
    return TreeChange(nxt, changed=True, category=updated)


# -- state-level helpers ------------------------------------------------------


def resolve_selection(categories: Forest, category_id: str | None) -> str | None:
    """Keep *category_id* if the forest has it, else fall back to the first root."""
    if category_id is None:
        return None
    if find_category(categories, category_id) is not None:
        return category_id
    return first_root_id(categories)


def remove_category(state: State, category_id: str) -> State:
    """Delete a category subtree and every bookmark filed anywhere inside it.

    A current selection inside the removed subtree moves to the first
    remaining root (or ``None``); a removed landing category is cleared.
    """
    change = delete_category(state.categories, category_id)
    if not change.changed:
        return state

    removed = change.removed_ids
    bookmarks = tuple(b for b in state.bookmarks if b.category_id not in removed)

    current_category_id = state.current_category_id
    if current_category_id and current_category_id in removed:
        current_category_id = first_root_id(change.categories)

    landing_category_id = state.landing_category_id
    if landing_category_id and landing_category_id in removed:
        landing_category_id = None

    return replace(
        state,
        categories=change.categories,
        bookmarks=bookmarks,
        current_category_id=current_category_id,
        landing_category_id=landing_category_id,
    )
