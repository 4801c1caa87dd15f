"""Invariant markers for linewrap."""

from __future__ import annotations

from typing import NoReturn

from linewrap.exceptions import NeverThrown


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The keyword payload is metadata only; it travels with the raised
    ``NeverThrown`` so callers can report what was violated.
    """
    raise NeverThrown(reason or "never() marker reached", env=env)
