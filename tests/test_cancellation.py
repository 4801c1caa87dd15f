from __future__ import annotations

import pytest

from linewrap.cancellation import (
    CancellationToken,
    Deadline,
    cancellation_scope,
    get_cancellation,
    resolve_cancellation,
)
from linewrap.exceptions import NeverThrown, OperationCancelled


def test_token_cancel_raises_operation_cancelled() -> None:
    token = CancellationToken()
    assert not token.is_cancellation_requested
    token.raise_if_cancellation_requested()
    token.cancel("stop")
    assert token.is_cancellation_requested
    with pytest.raises(OperationCancelled, match="stop"):
        token.raise_if_cancellation_requested()


def test_expired_deadline_cancels_token() -> None:
    token = CancellationToken(deadline=Deadline(deadline_ns=0))
    assert token.is_cancellation_requested
    with pytest.raises(OperationCancelled, match="timed out"):
        token.raise_if_cancellation_requested()


def test_timeout_token_is_live_until_deadline() -> None:
    token = CancellationToken.from_timeout_ms(60_000)
    assert token.deadline is not None
    assert not token.is_cancellation_requested


def test_deadline_rejects_invalid_ticks() -> None:
    with pytest.raises(NeverThrown):
        Deadline.from_timeout_ticks(-1, 1)
    with pytest.raises(NeverThrown):
        Deadline.from_timeout_ticks(1, 0)


def test_shared_none_token_cannot_be_cancelled() -> None:
    with pytest.raises(NeverThrown):
        CancellationToken.none().cancel()


def test_scope_sets_ambient_token() -> None:
    token = CancellationToken()
    outer = get_cancellation()
    with cancellation_scope(token):
        assert get_cancellation() is token
        assert resolve_cancellation(None) is token
        token.cancel()
        with pytest.raises(OperationCancelled):
            resolve_cancellation(None).raise_if_cancellation_requested()
    assert get_cancellation() is outer


def test_explicit_token_wins_over_ambient() -> None:
    explicit = CancellationToken()
    assert resolve_cancellation(explicit) is explicit
