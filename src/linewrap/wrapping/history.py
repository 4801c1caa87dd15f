from __future__ import annotations

import logging
import threading
from typing import Iterable

from linewrap.invariants import never

log = logging.getLogger(__name__)


def _dedupe(titles: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for title in titles:
        if title in seen:
            continue
        seen.add(title)
        ordered.append(title)
    return tuple(ordered)


class UsageHistoryStore:
    """Most-recently-used titles of invoked actions, newest first.

    Readers take ``snapshot()`` without locking: every update builds a new
    tuple and publishes it with a single assignment. Writers are serialized so
    concurrent ``record()`` calls never lose an update.
    """

    def __init__(self, titles: Iterable[str] = ()) -> None:
        self._titles: tuple[str, ...] = _dedupe(titles)
        self._write_lock = threading.Lock()

    def snapshot(self) -> tuple[str, ...]:
        return self._titles

    def record(self, title: str) -> tuple[str, ...]:
        if not title:
            never("usage history titles must be non-empty")
        with self._write_lock:
            titles = (title,) + tuple(entry for entry in self._titles if entry != title)
            self._titles = titles
        log.debug("recorded action invocation %r (%d titles)", title, len(titles))
        return titles

    def clear(self) -> None:
        with self._write_lock:
            self._titles = ()


_DEFAULT_STORE = UsageHistoryStore()


def default_history_store() -> UsageHistoryStore:
    return _DEFAULT_STORE
