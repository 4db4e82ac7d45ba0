"""Shared test fixtures for the zander test suite."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from pathlib import Path

import pytest

from zander.constants import PROBE_KEY
from zander.persistence import JsonFileBackend, MemoryBackend
from zander.state import AppState, Bookmark, Category, State


def _category(cid: str, *children: Category, name: str | None = None) -> Category:
    return Category(
        id=cid,
        name=name or cid.title(),
        color="#ffffff",
        created_at=f"sd-{cid}",
        children=tuple(children),
    )


def _bookmark(bid: str, category_id: str, **kwargs) -> Bookmark:
    return Bookmark(
        id=bid,
        title=kwargs.get("title", bid.upper()),
        url=kwargs.get("url", f"https://{bid}.example"),
        category_id=category_id,
        created_at=kwargs.get("created_at", f"sd-{bid}"),
        description=kwargs.get("description"),
    )


class FailingStorage(MutableMapping):
    """Mapping whose real writes raise ``OSError`` once ``fail_writes`` is set.

    The probe key is still accepted, so failures surface as ``write-failed``
    rather than ``storage-unavailable``.
    """

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.fail_writes = False

    def __getitem__(self, key: str) -> str:
        return self.data[key]

    def __setitem__(self, key: str, value: str) -> None:
        if self.fail_writes and key != PROBE_KEY:
            raise OSError("quota exceeded")
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


# -- Factories ----------------------------------------------------------------


@pytest.fixture
def make_category():
    """Build a category: ``make_category("a", make_category("b"))``."""
    return _category


@pytest.fixture
def make_bookmark():
    """Build a bookmark filed under a category id; fields default from the id."""
    return _bookmark


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


# -- Forest / state fixtures --------------------------------------------------


@pytest.fixture
def forest() -> tuple[Category, ...]:
    """Two roots; ``root`` has a nested ``child`` -> ``grandchild`` chain.

    ::

        root
          child
            grandchild
          sibling
        other
    """
    return (
        _category(
            "root",
            _category("child", _category("grandchild")),
            _category("sibling"),
        ),
        _category("other"),
    )


@pytest.fixture
def sample_state(forest) -> State:
    return State(
        bookmarks=(
            _bookmark("b-root", "root"),
            _bookmark("b-child", "child", description="nested"),
            _bookmark("b-grand", "grandchild"),
            _bookmark("b-sibling", "sibling"),
            _bookmark("b-other", "other"),
        ),
        categories=forest,
        current_category_id="child",
    )


# -- Backends -----------------------------------------------------------------


@pytest.fixture
def storage() -> dict[str, str]:
    return {}


@pytest.fixture
def backend(storage) -> MemoryBackend:
    return MemoryBackend(storage)


@pytest.fixture
def file_backend(tmp_path: Path) -> JsonFileBackend:
    return JsonFileBackend(tmp_path / "data")


@pytest.fixture
def app(backend) -> AppState:
    return AppState(backend)
