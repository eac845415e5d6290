"""Background change detection for the backing file.

An APScheduler interval job polls the file's stat signature. Any difference
from the last observed signature (content edit, rename-away, delete or
recreate) fires the callback, which reconciles the in-memory cache.
"""
from __future__ import annotations

import logging
import os
import threading
import weakref
from typing import Callable, Optional, Tuple

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

Signature = Optional[Tuple[int, int, int]]


def file_signature(path: str) -> Signature:
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size, st.st_ino)


class FileWatcher:
    """Polls ``path`` and calls ``on_change`` when its signature moves.

    A bound-method callback is held weakly, so a watcher never keeps its
    owner alive; once the owner is collected the watcher stops itself.
    """

    def __init__(self, path: str, on_change: Callable[[], None], interval: float = 1.0):
        self.path = path
        self.interval = interval
        try:
            self._on_change = weakref.WeakMethod(on_change)
        except TypeError:
            self._on_change = lambda: on_change
        self._last: Signature = None
        self._check_lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        self._last = file_signature(self.path)
        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            self._poll,
            "interval",
            seconds=self.interval,
            id=f"watch:{self.path}",
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.debug("Watching %s every %ss", self.path, self.interval)

    def stop(self) -> None:
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is None:
            return
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.debug("Stopped watching %s", self.path)

    def check(self) -> bool:
        """Run one poll step now. Returns True if a change was seen."""
        with self._check_lock:
            callback = self._on_change()
            if callback is None:
                self.stop()
                return False
            current = file_signature(self.path)
            if current == self._last:
                return False
            logger.info("Change detected on %s", self.path)
            # recorded before the callback: a write landing while it runs is
            # seen by the next check, including the callback's own writes
            previous, self._last = self._last, current
            try:
                callback()
            except Exception:
                self._last = previous
                raise
            return True

    def _poll(self) -> None:
        try:
            self.check()
        except Exception:
            logger.exception("Reconciliation of %s failed", self.path)
