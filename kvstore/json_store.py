from __future__ import annotations

from typing import Any, Optional

from .base import MISSING, KeyValueStore
from .config import Settings
from .storage import CacheStore
from .values import Scalar, convert, resolve_kind


class JsonStore(KeyValueStore):
    """Key-value store persisted to a JSON flat file.

    Thin typed layer over :class:`CacheStore`, which does the caching,
    locking and change reconciliation. The file need not exist; it and its
    directory are created on construction.
    """

    def __init__(self, path: str, settings: Optional[Settings] = None):
        self._store = CacheStore(path, settings=settings)

    @property
    def path(self) -> str:
        return self._store.path

    @property
    def cache(self) -> CacheStore:
        return self._store

    def set_value(self, key: str, value: Scalar, overwrite_if_exists: bool = True) -> bool:
        return self._store.set(key, value, overwrite_if_exists)

    def delete_value(self, key: str) -> None:
        self._store.delete(key)

    def get_value(self, key: str, kind: Any, default: Any = MISSING) -> Any:
        target = resolve_kind(kind)
        value, found = self._store.lookup(key, throw_on_missing=default is MISSING)
        if not found:
            return default
        return convert(value, target)

    def close(self) -> None:
        self._store.close()
