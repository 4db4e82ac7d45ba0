"""Pure bookmark rules: URL normalisation, category resolution, patching."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum

from ..constants import EXPORT_VERSION
from ..errors import StorageError, StorageErrorCode
from .model import Bookmark, Category, ExportBundle, State
from .utils import create_timestamp, first_root_id, generate_id

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


class UnsetType(Enum):
    """Type of the :data:`UNSET` sentinel."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


#: Marks a patch field the caller did not supply (distinct from ``None``).
UNSET = UnsetType.UNSET


def normalize_url(raw: str) -> str:
    """Trim *raw* and prefix ``https://`` unless it already has a scheme.

    Any ``scheme:`` prefix counts, so ``mailto:`` and odd-looking schemes
    pass through untouched.  Blank input normalises to ``""``.
    """
    trimmed = raw.strip()
    if trimmed == "":
        return ""
    if _SCHEME_RE.match(trimmed):
        return trimmed
    return f"https://{trimmed}"


def collect_category_ids(categories: Iterable[Category]) -> set[str]:
    result: set[str] = set()

    def walk(nodes: Iterable[Category]) -> None:
        for node in nodes:
            result.add(node.id)
            if node.children:
                walk(node.children)

    walk(categories)
    return result


def get_effective_category_id_for_new_bookmark(
    *,
    explicit_category_id: str | None,
    current_category_id: str | None,
    categories: tuple[Category, ...],
) -> str | None:
    """Pick the category a bookmark should be filed under.

    Resolution order: the explicit id if it exists, then the current
    selection if it exists, then the first root, then ``None`` for an empty
    forest.
    """
    all_ids = collect_category_ids(categories)

    if explicit_category_id and explicit_category_id in all_ids:
        return explicit_category_id
    if current_category_id and current_category_id in all_ids:
        return current_category_id
    return first_root_id(categories)


def create_bookmark(
    *,
    title: str,
    url: str,
    category_id: str,
    description: str | None = None,
    generate_id: Callable[[], str] = generate_id,
    create_timestamp: Callable[[], str] = create_timestamp,
) -> Bookmark:
    return Bookmark(
        id=generate_id(),
        title=title,
        url=normalize_url(url),
        category_id=category_id,
        created_at=create_timestamp(),
        description=description,
    )


@dataclass(frozen=True)
class BookmarkUpdate:
    """A partial bookmark edit.

    ``UNSET`` leaves a field alone.  ``None`` clears ``description`` and is
    ignored for the other fields.  ``category_id`` must already be resolved.
    """

    title: str | None | UnsetType = UNSET
    url: str | None | UnsetType = UNSET
    description: str | None | UnsetType = UNSET
    category_id: str | None | UnsetType = UNSET


def apply_bookmark_update(bookmark: Bookmark, patch: BookmarkUpdate) -> Bookmark:
    changes: dict[str, str | None] = {}

    if patch.title is not UNSET and patch.title is not None:
        changes["title"] = patch.title
    if patch.url is not UNSET and patch.url is not None:
        changes["url"] = normalize_url(patch.url)
    if patch.description is not UNSET:
        changes["description"] = patch.description
    if patch.category_id is not UNSET and patch.category_id is not None:
        changes["category_id"] = patch.category_id

    if not changes:
        return bookmark
    return replace(bookmark, **changes)


def import_state(current: State, incoming: State) -> State:
    """Adopt *incoming* wholesale, dropping bookmarks with dangling categories.

    The current category selection survives when the incoming forest still
    contains it; otherwise it falls back to the first incoming root.  A
    landing category the incoming forest lacks is cleared.
    """
    allowed_ids = collect_category_ids(incoming.categories)

    bookmarks = tuple(b for b in incoming.bookmarks if b.category_id in allowed_ids)

    current_category_id = current.current_category_id
    if current_category_id and current_category_id not in allowed_ids:
        current_category_id = first_root_id(incoming.categories)

    landing_category_id = incoming.landing_category_id
    if landing_category_id and landing_category_id not in allowed_ids:
        landing_category_id = None

    return replace(
        incoming,
        bookmarks=bookmarks,
        current_category_id=current_category_id,
        landing_category_id=landing_category_id,
    )


def check_bundle_version(bundle: ExportBundle) -> None:
    """Raise ``version-unsupported`` unless *bundle* has the current version."""
    if bundle.version != EXPORT_VERSION:
        raise StorageError(
            StorageErrorCode.VERSION_UNSUPPORTED,
            f"Unsupported export bundle version: {bundle.version}",
        )
