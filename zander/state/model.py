"""Immutable data shapes for the bookmark organizer.

Every snapshot is built from frozen dataclasses and tuples, so a ``State``
can be shared freely between readers: mutations always produce a new
snapshot (see :func:`dataclasses.replace`) and reuse untouched subtrees by
reference.

The JSON form of each type uses the camelCase keys of the persisted
layout; ``to_dict`` / ``from_dict`` are the only place that mapping lives.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..constants import DEFAULT_CATEGORY_COLOR, DEFAULT_VIEW
from ..errors import StorageError, StorageErrorCode


@dataclass(frozen=True)
class Bookmark:
    """A saved link filed under one category."""

    id: str
    title: str
    url: str  # always normalised, see domain.normalize_url
    category_id: str  # "" when no category existed at creation time
    created_at: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "categoryId": self.category_id,
            "createdAt": self.created_at,
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bookmark:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            url=str(data.get("url", "")),
            category_id=str(data.get("categoryId") or ""),
            created_at=str(data.get("createdAt", "")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Category:
    """A node in the category forest.  Sibling order is display order."""

    id: str
    name: str
    color: str
    created_at: str
    children: tuple[Category, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "createdAt": self.created_at,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            color=str(data.get("color") or DEFAULT_CATEGORY_COLOR),
            created_at=str(data.get("createdAt", "")),
            children=tuple(cls.from_dict(c) for c in data.get("children") or ()),
        )


@dataclass(frozen=True)
class State:
    """The whole application snapshot; the unit of persistence."""

    bookmarks: tuple[Bookmark, ...] = ()
    categories: tuple[Category, ...] = ()
    current_category_id: str | None = None
    current_view: str = DEFAULT_VIEW
    current_settings_page: str | None = None
    landing_category_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bookmarks": [b.to_dict() for b in self.bookmarks],
            "categories": [c.to_dict() for c in self.categories],
            "currentCategoryId": self.current_category_id,
            "currentView": self.current_view,
            "currentSettingsPage": self.current_settings_page,
            "landingCategoryId": self.landing_category_id,
        }

    @classmethod
    def from_dict(cls, data: Any) -> State:
        """Build a snapshot from its JSON form.

        Missing keys fall back to the defaults.  Anything that is not
        shaped like a state raises ``StorageError`` with ``invalid-json``.
        """
        if not isinstance(data, dict):
            raise StorageError(
                StorageErrorCode.INVALID_JSON,
                f"Expected a state object, got {type(data).__name__}",
            )
        try:
            return cls(
                bookmarks=tuple(
                    Bookmark.from_dict(b) for b in data.get("bookmarks") or ()
                ),
                categories=tuple(
                    Category.from_dict(c) for c in data.get("categories") or ()
                ),
                current_category_id=data.get("currentCategoryId"),
                current_view=data.get("currentView") or DEFAULT_VIEW,
                current_settings_page=data.get("currentSettingsPage"),
                landing_category_id=data.get("landingCategoryId"),
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise StorageError(
                StorageErrorCode.INVALID_JSON, f"Malformed state payload: {exc}"
            ) from exc


@dataclass(frozen=True)
class ExportMeta:
    exported_at_stardate: str
    source_backend: str

    def to_dict(self) -> dict[str, str]:
        return {
            "exportedAtStardate": self.exported_at_stardate,
            "sourceBackend": self.source_backend,
        }


@dataclass(frozen=True)
class ExportBundle:
    """A versioned, self-describing snapshot used for backup and restore."""

    version: str
    state: State
    meta: ExportMeta

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "state": self.state.to_dict(),
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> ExportBundle:
        """Parse a bundle without checking its version (importers do that)."""
        if not isinstance(data, dict):
            raise StorageError(
                StorageErrorCode.INVALID_JSON,
                f"Expected an export bundle object, got {type(data).__name__}",
            )
        meta = data.get("meta")
        if not isinstance(meta, dict):
            meta = {}
        return cls(
            version=str(data.get("version", "")),
            state=State.from_dict(data.get("state")),
            meta=ExportMeta(
                exported_at_stardate=str(meta.get("exportedAtStardate", "")),
                source_backend=str(meta.get("sourceBackend", "")),
            ),
        )
