"""Id, timestamp and category tree helpers shared by the state modules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from .model import Category


def generate_id() -> str:
    return str(uuid.uuid4())


def create_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def collect_ids_for_category_tree(root: Category, acc: set[str]) -> None:
    """Add *root*'s id and every descendant id to *acc*."""
    acc.add(root.id)
    for child in root.children:
        collect_ids_for_category_tree(child, acc)


def first_root_id(categories: tuple[Category, ...]) -> str | None:
    return categories[0].id if categories else None
