from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from linewrap.cancellation import CancellationToken
from linewrap.document import Document, TextProvider
from linewrap.exceptions import NeverThrown, OperationCancelled


def test_document_reads_path_once(write_source) -> None:
    path: Path = write_source("compute(alpha)\n")
    document = Document.from_path(path)
    first = asyncio.run(document.get_text())
    path.write_text("changed\n", encoding="utf-8")
    second = asyncio.run(document.get_text())
    assert first is second
    assert first.text == "compute(alpha)\n"
    assert document.uri == path.resolve().as_uri()


def test_document_prefers_buffer_text() -> None:
    document = Document("file:///buffer.py", text="x = 1\n", version=3)
    assert asyncio.run(document.get_text()).text == "x = 1\n"
    assert document.version == 3
    assert isinstance(document, TextProvider)


def test_document_requires_a_source() -> None:
    with pytest.raises(NeverThrown):
        Document("file:///nothing.py")


def test_cancelled_fetch_propagates() -> None:
    token = CancellationToken()
    token.cancel()
    document = Document("file:///buffer.py", text="x = 1\n")
    with pytest.raises(OperationCancelled):
        asyncio.run(document.get_text(token))


def test_syntax_is_built_once_per_document() -> None:
    document = Document("file:///buffer.py", text="compute(alpha)\n")
    first = asyncio.run(document.get_syntax())
    assert asyncio.run(document.get_syntax()) is first
