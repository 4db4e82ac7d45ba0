"""Persistence layer – each backend owns its medium, key and data format."""

from ._base import KeyValueBackend
from .backend import PersistenceBackend
from .bundles import load_bundle, write_bundle
from .json_file import JsonFileBackend
from .memory import MemoryBackend

__all__ = [
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "PersistenceBackend",
    "load_bundle",
    "write_bundle",
]
