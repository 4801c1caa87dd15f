from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable

from linewrap.cancellation import CancellationToken, resolve_cancellation
from linewrap.cst_syntax import PythonSyntaxIndex
from linewrap.invariants import never
from linewrap.text import SourceText


@runtime_checkable
class TextProvider(Protocol):
    async def get_text(self, cancellation: CancellationToken | None = None) -> SourceText: ...


class Document:
    """One version of a source document.

    The text is either supplied up front (an editor buffer) or read from
    ``path`` on first use. Text and syntax snapshots are built once and shared
    by every request against this document version.
    """

    def __init__(
        self,
        uri: str,
        *,
        text: str | None = None,
        path: Path | None = None,
        version: int | None = None,
    ) -> None:
        if text is None and path is None:
            never("document needs text or a path", uri=uri)
        self.uri = uri
        self.path = path
        self.version = version
        self._raw_text = text
        self._text: SourceText | None = None
        self._syntax: PythonSyntaxIndex | None = None

    @classmethod
    def from_path(cls, path: Path) -> "Document":
        return cls(path.resolve().as_uri(), path=path)

    async def get_text(self, cancellation: CancellationToken | None = None) -> SourceText:
        token = resolve_cancellation(cancellation)
        token.raise_if_cancellation_requested()
        if self._text is None:
            raw = self._raw_text
            if raw is None:
                raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            token.raise_if_cancellation_requested()
            self._text = SourceText(raw)
        return self._text

    async def get_syntax(self, cancellation: CancellationToken | None = None) -> PythonSyntaxIndex:
        text = await self.get_text(cancellation)
        if self._syntax is None:
            self._syntax = PythonSyntaxIndex.parse(text)
        return self._syntax
