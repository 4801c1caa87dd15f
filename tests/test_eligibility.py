from __future__ import annotations

import asyncio

import pytest

from linewrap.cancellation import CancellationToken
from linewrap.document import Document
from linewrap.exceptions import OperationCancelled
from linewrap.syntax import SyntaxNode
from linewrap.text import SourceText, TextSpan
from linewrap.wrapping.eligibility import (
    contains_unformattable_content,
    has_unformattable_content,
)
from tests.syntax_helpers import missing_token, node, token

SOURCE = 'foo(alpha, beta)\nbar(\n    gamma,\n)\ndoc = """a\nb"""\n'
TEXT = SourceText(SOURCE)


def test_tokens_on_one_line_are_formattable() -> None:
    items = [token(SOURCE, "alpha"), token(SOURCE, "beta")]
    assert has_unformattable_content(items, TEXT) is False


def test_node_spanning_lines_is_unformattable() -> None:
    spanning = node(token(SOURCE, "bar"), token(SOURCE, "(", 1, kind="OP"), token(SOURCE, ")", 1, kind="OP"))
    assert has_unformattable_content([spanning], TEXT) is True


def test_empty_items_are_formattable() -> None:
    assert has_unformattable_content([], TEXT) is False


def test_single_line_node_is_formattable() -> None:
    call = node(token(SOURCE, "foo"), token(SOURCE, "alpha"), token(SOURCE, ")", kind="OP"))
    assert has_unformattable_content([call], TEXT) is False


def test_absent_item_is_unformattable() -> None:
    assert has_unformattable_content([token(SOURCE, "alpha"), None], TEXT) is True


def test_empty_span_is_unformattable() -> None:
    assert has_unformattable_content([missing_token(3)], TEXT) is True
    empty_node = SyntaxNode(kind="Node", span=TextSpan(start=4, length=0))
    assert has_unformattable_content([empty_node], TEXT) is True


def test_node_without_tokens_is_unformattable() -> None:
    hollow = SyntaxNode(kind="Node", span=TextSpan(start=0, length=3))
    assert has_unformattable_content([hollow], TEXT) is True


def test_token_spanning_lines_is_unformattable() -> None:
    start = SOURCE.index('"""a')
    string = token(SOURCE, '"""a\nb"""', kind="STRING")
    assert string.span.start == start
    assert has_unformattable_content([string], TEXT) is True


def test_check_stops_at_first_disqualifying_item() -> None:
    def _items():
        yield token(SOURCE, "alpha")
        yield None
        raise AssertionError("items after a disqualifying item must not be read")

    assert has_unformattable_content(_items(), TEXT) is True


class _CountingProvider:
    def __init__(self, text: str) -> None:
        self.text = SourceText(text)
        self.calls = 0

    async def get_text(self, cancellation: CancellationToken | None = None) -> SourceText:
        self.calls += 1
        return self.text


def test_async_check_fetches_text_once() -> None:
    provider = _CountingProvider(SOURCE)
    items = [token(SOURCE, "alpha"), token(SOURCE, "beta"), token(SOURCE, "gamma")]
    result = asyncio.run(contains_unformattable_content(provider, items))
    assert result is False
    assert provider.calls == 1


def test_async_check_reports_multiline_items() -> None:
    document = Document("file:///sample.py", text=SOURCE)
    spanning = node(token(SOURCE, "bar"), token(SOURCE, ")", 1, kind="OP"))
    assert asyncio.run(contains_unformattable_content(document, [spanning])) is True


def test_async_check_propagates_cancellation() -> None:
    document = Document("file:///sample.py", text=SOURCE)
    cancelled = CancellationToken()
    cancelled.cancel("user moved on")
    with pytest.raises(OperationCancelled, match="user moved on"):
        asyncio.run(contains_unformattable_content(document, [token(SOURCE, "alpha")], cancelled))
