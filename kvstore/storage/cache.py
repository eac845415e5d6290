"""In-memory cache kept in step with a JSON file on disk.

One re-entrant lock guards every cache mutation, every flush, the reload
triggered by an external change and the value read of ``lookup``. A flush
happens before ``set``/``delete`` return, so when no call is in progress the
cache is exactly what the file holds, unless the file was found corrupt.
"""
from __future__ import annotations

import logging
import os
import threading
import weakref
from typing import Dict, List, Optional, Tuple

from ..config import Settings
from ..exceptions import (
    CodecError,
    KeyNotFoundError,
    StoreCorruptError,
    StoreUnreachableError,
)
from ..values import Scalar, ScalarKind, check_key, kind_of
from ..watcher import FileWatcher
from . import files

logger = logging.getLogger(__name__)


def _unreachable_msg(op: str, path: str) -> str:
    return f"{op} -- There was an error creating or accessing [{path}]. See the chained exception for details."


def _corrupt_msg(op: str, path: str) -> str:
    return f"{op} -- [{path}] could not be parsed because it is mal-formatted."


class CacheStore:
    def __init__(self, path: str, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.path = path
        self._lock = threading.RLock()
        self._cache: Dict[str, Scalar] = {}
        self._corrupt = False
        self._watcher: Optional[FileWatcher] = None

        try:
            already_existed = files.validate_and_prepare(path)
        except (OSError, ValueError) as exc:
            # ValueError covers embedded NUL bytes in the path
            raise StoreUnreachableError(_unreachable_msg("CacheStore()", path)) from exc

        with self._lock:
            if already_existed:
                self._cache = self._load("CacheStore()")
            else:
                self._flush("CacheStore()")
        logger.info("Opened store %s with %d keys", path, len(self._cache))

        watcher = FileWatcher(path, self.reconcile, interval=self.settings.poll_interval)
        try:
            watcher.start()
        except Exception as exc:
            raise StoreUnreachableError(
                f"CacheStore() -- Could not start watching [{path}]."
            ) from exc
        self._watcher = watcher
        # stops the poll thread when the store is closed or collected
        self._finalizer = weakref.finalize(self, watcher.stop)

    @property
    def watcher(self) -> Optional[FileWatcher]:
        return self._watcher

    @property
    def is_corrupt(self) -> bool:
        return self._corrupt

    def lookup(self, key: str, throw_on_missing: bool = False) -> Tuple[Optional[Scalar], bool]:
        """Return ``(value, True)`` for a present key, ``(None, False)`` otherwise.

        Raises KeyNotFoundError instead of returning ``(None, False)`` when
        ``throw_on_missing`` is set.
        Floats come back as plain ``float`` whatever kind they were set as.
        """
        self._check_corrupt("CacheStore.lookup")
        check_key(key)
        # lock-free presence check; a racing flush only changes which branch wins
        if key in self._cache:
            with self._lock:
                try:
                    return self._cache[key], True
                except KeyError:
                    pass
        if throw_on_missing:
            raise KeyNotFoundError(f"Key [{key}] does not exist in the store.")
        return None, False

    def set(self, key: str, value: Scalar, overwrite_if_exists: bool = True) -> bool:
        """Insert or update ``key``; False when it exists and overwriting is off."""
        self._check_corrupt("CacheStore.set")
        check_key(key)
        if kind_of(value) == ScalarKind.FLOAT:
            # same shape a reload from disk produces
            value = float(value)
        with self._lock:
            self._check_corrupt("CacheStore.set")
            exists = key in self._cache
            if exists and not overwrite_if_exists:
                return False
            previous = self._cache.get(key)
            self._cache[key] = value
            try:
                self._flush("CacheStore.set")
            except StoreUnreachableError:
                if exists:
                    self._cache[key] = previous
                else:
                    del self._cache[key]
                raise
        return True

    def delete(self, key: str) -> None:
        self._check_corrupt("CacheStore.delete")
        check_key(key)
        with self._lock:
            self._check_corrupt("CacheStore.delete")
            if key not in self._cache:
                return
            previous = self._cache.pop(key)
            try:
                self._flush("CacheStore.delete")
            except StoreUnreachableError:
                self._cache[key] = previous
                raise

    def reconcile(self) -> None:
        """Bring the cache back in line with whatever is on disk now.

        A missing file is recreated from an empty cache. A corrupt file sets
        the corruption flag and keeps the last good cache.
        """
        with self._lock:
            if not os.path.exists(self.path):
                logger.warning("%s disappeared, recreating it empty", self.path)
                self._cache = {}
                self._corrupt = False
                self._flush("CacheStore.reconcile")
                return
            try:
                self._cache = self._load("CacheStore.reconcile")
            except StoreCorruptError:
                logger.error("%s is corrupt, store is unusable until it is fixed", self.path)
                return
        logger.info("Reloaded %s (%d keys)", self.path, len(self._cache))

    def keys(self) -> List[str]:
        self._check_corrupt("CacheStore.keys")
        with self._lock:
            return list(self._cache)

    def snapshot(self) -> Dict[str, Scalar]:
        self._check_corrupt("CacheStore.snapshot")
        with self._lock:
            return dict(self._cache)

    def __contains__(self, key: object) -> bool:
        self._check_corrupt("CacheStore.__contains__")
        return key in self._cache

    def __len__(self) -> int:
        self._check_corrupt("CacheStore.__len__")
        return len(self._cache)

    def close(self) -> None:
        if self._watcher is not None:
            self._finalizer()
            self._watcher = None

    def __enter__(self) -> "CacheStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check_corrupt(self, op: str) -> None:
        if self._corrupt:
            raise StoreCorruptError(_corrupt_msg(op, self.path))

    def _load(self, op: str) -> Dict[str, Scalar]:
        # caller holds the lock
        try:
            data = files.load(self.path)
        except CodecError as exc:
            self._corrupt = True
            raise StoreCorruptError(_corrupt_msg(op, self.path)) from exc
        except OSError as exc:
            raise StoreUnreachableError(_unreachable_msg(op, self.path)) from exc
        self._corrupt = False
        return data

    def _flush(self, op: str) -> None:
        # caller holds the lock
        try:
            files.flush(self.path, self._cache, indent=self.settings.json_indent)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StoreUnreachableError(_unreachable_msg(op, self.path)) from exc
