"""Embedded key-value persistence with JSON flat-file and SQL backends."""

from .base import MISSING, KeyValueStore
from .config import Settings
from .exceptions import (
    IllegalTypeError,
    KeyNotFoundError,
    KeyValueStoreError,
    StoreCorruptError,
    StoreUnreachableError,
    TypeMismatchError,
)
from .json_store import JsonStore
from .logs import configure_logging
from .sql_store import SqlStore
from .values import Float32, ScalarKind

__all__ = [
    "MISSING",
    "KeyValueStore",
    "Settings",
    "IllegalTypeError",
    "KeyNotFoundError",
    "KeyValueStoreError",
    "StoreCorruptError",
    "StoreUnreachableError",
    "TypeMismatchError",
    "JsonStore",
    "configure_logging",
    "SqlStore",
    "Float32",
    "ScalarKind",
]
