"""Zander: a bookmark organizer with a tree of categories and durable state."""

__version__ = "0.1.0"
