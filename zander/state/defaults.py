"""First-run state."""

from __future__ import annotations

from .model import State


def create_default_state() -> State:
    """Return an empty snapshot: no bookmarks, no categories, bookmarks view."""
    return State()
