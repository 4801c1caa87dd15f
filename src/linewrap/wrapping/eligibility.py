from __future__ import annotations

from typing import Iterable

from linewrap.cancellation import CancellationToken
from linewrap.document import TextProvider
from linewrap.syntax import SyntaxElement, boundary_tokens
from linewrap.text import SourceText


def _is_unformattable(item: SyntaxElement | None, text: SourceText) -> bool:
    if item is None or item.span.is_empty:
        return True
    first_token, last_token = boundary_tokens(item)
    if first_token is None or last_token is None:
        return True
    return not text.are_on_same_line(first_token, last_token)


def has_unformattable_content(
    items: Iterable[SyntaxElement | None],
    text: SourceText,
) -> bool:
    """True when any item is absent, empty, or spans more than one line.

    Moving multi-line items would need re-indentation of their inner lines,
    which wrapping does not attempt. Stops at the first disqualifying item.
    """
    for item in items:
        if _is_unformattable(item, text):
            return True
    return False


async def contains_unformattable_content(
    document: TextProvider,
    items: Iterable[SyntaxElement | None],
    cancellation: CancellationToken | None = None,
) -> bool:
    text = await document.get_text(cancellation)
    return has_unformattable_content(items, text)
