from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import Iterator

from linewrap.exceptions import OperationCancelled
from linewrap.invariants import never


@dataclass(frozen=True)
class MonotonicClock:
    """Default wall clock used when no other clock is injected."""

    def get_mark(self) -> int:
        return time.monotonic_ns()


_SYSTEM_CLOCK = MonotonicClock()


@dataclass(frozen=True)
class Deadline:
    deadline_ns: int

    @classmethod
    def from_timeout_ticks(cls, ticks: int, tick_ns: int) -> "Deadline":
        ticks_value = int(ticks)
        tick_ns_value = int(tick_ns)
        if ticks_value < 0:
            never("invalid timeout ticks", ticks=ticks)
        if tick_ns_value <= 0:
            never("invalid timeout tick_ns", tick_ns=tick_ns)
        return cls(deadline_ns=_SYSTEM_CLOCK.get_mark() + ticks_value * tick_ns_value)

    @classmethod
    def from_timeout_ms(cls, milliseconds: int) -> "Deadline":
        return cls.from_timeout_ticks(milliseconds, 1_000_000)

    def expired(self) -> bool:
        return _SYSTEM_CLOCK.get_mark() >= self.deadline_ns


class CancellationToken:
    """Cooperative cancellation signal threaded through a suggestion request.

    A token is cancelled either explicitly via ``cancel()`` or implicitly once
    its optional deadline expires. Work that may suspend checks the token with
    ``raise_if_cancellation_requested()`` and lets ``OperationCancelled``
    propagate.
    """

    def __init__(self, deadline: Deadline | None = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline
        self._reason = ""

    @classmethod
    def none(cls) -> "CancellationToken":
        return _NEVER_CANCELLED

    @classmethod
    def from_timeout_ms(cls, milliseconds: int) -> "CancellationToken":
        return cls(deadline=Deadline.from_timeout_ms(milliseconds))

    @property
    def deadline(self) -> Deadline | None:
        return self._deadline

    @property
    def is_cancellation_requested(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and self._deadline.expired()

    def cancel(self, reason: str = "") -> None:
        if self is _NEVER_CANCELLED:
            never("the shared non-cancellable token cannot be cancelled")
        self._reason = reason
        self._event.set()

    def raise_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise OperationCancelled(self._reason or "Operation cancelled.")
        if self._deadline is not None and self._deadline.expired():
            raise OperationCancelled("Operation timed out.")


_NEVER_CANCELLED = CancellationToken()

_cancellation_var: ContextVar[CancellationToken | None] = ContextVar(
    "linewrap_cancellation", default=None
)


def set_cancellation(token: CancellationToken) -> Token[CancellationToken | None]:
    return _cancellation_var.set(token)


def reset_cancellation(token: Token[CancellationToken | None]) -> None:
    _cancellation_var.reset(token)


def get_cancellation() -> CancellationToken:
    token = _cancellation_var.get()
    if token is None:
        return _NEVER_CANCELLED
    return token


def resolve_cancellation(token: CancellationToken | None) -> CancellationToken:
    if token is not None:
        return token
    return get_cancellation()


@contextmanager
def cancellation_scope(token: CancellationToken) -> Iterator[CancellationToken]:
    reset_token = set_cancellation(token)
    try:
        yield token
    finally:
        reset_cancellation(reset_token)
