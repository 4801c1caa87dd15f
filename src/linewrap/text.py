from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from linewrap.invariants import never

if TYPE_CHECKING:
    from linewrap.syntax import SyntaxToken

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TextSpan:
    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.length < 0:
            never("invalid text span", start=self.start, length=self.length)

    @classmethod
    def from_bounds(cls, start: int, end: int) -> "TextSpan":
        if end < start:
            never("text span end precedes start", start=start, end=end)
        return cls(start=start, length=end - start)

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def contains_span(self, other: "TextSpan") -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class LinePosition:
    line: int
    character: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.line, self.character)


@dataclass(frozen=True)
class SourceText:
    """Immutable snapshot of a document's text.

    Lines are split on ``\\r\\n``, ``\\r`` and ``\\n``; line and character
    indices are zero-based. Offsets index into ``text`` and may equal
    ``len(text)`` (the end-of-file position).
    """

    text: str
    line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        starts.extend(match.end() for match in _LINE_BREAK_RE.finditer(self.text))
        object.__setattr__(self, "line_starts", tuple(starts))

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def _check_offset(self, offset: int) -> None:
        if offset < 0 or offset > len(self.text):
            never("offset outside source text", offset=offset, length=len(self.text))

    def line_index(self, offset: int) -> int:
        self._check_offset(offset)
        return bisect_right(self.line_starts, offset) - 1

    def position_of(self, offset: int) -> LinePosition:
        line = self.line_index(offset)
        return LinePosition(line=line, character=offset - self.line_starts[line])

    def offset_of(self, line: int, character: int) -> int:
        if line < 0 or line >= self.line_count:
            never("line outside source text", line=line, line_count=self.line_count)
        if character < 0:
            never("negative character index", line=line, character=character)
        # Clamp to the end of the line content, as editors send carets past EOL.
        return min(self.line_starts[line] + character, self._line_content_end(line))

    def _line_content_end(self, line: int) -> int:
        if line + 1 < self.line_count:
            end = self.line_starts[line + 1]
            while end > self.line_starts[line] and self.text[end - 1] in "\r\n":
                end -= 1
            return end
        return len(self.text)

    def line_text(self, line: int) -> str:
        if line < 0 or line >= self.line_count:
            never("line outside source text", line=line, line_count=self.line_count)
        return self.text[self.line_starts[line] : self._line_content_end(line)]

    def line_break(self, line: int) -> str:
        """The break ending ``line``, or ``"\\n"`` for the unterminated last line."""
        if line < 0 or line >= self.line_count:
            never("line outside source text", line=line, line_count=self.line_count)
        if line + 1 < self.line_count:
            return self.text[self._line_content_end(line) : self.line_starts[line + 1]]
        return "\n"

    def slice(self, span: TextSpan) -> str:
        self._check_offset(span.end)
        return self.text[span.start : span.end]

    def are_on_same_line(self, first: "SyntaxToken", last: "SyntaxToken") -> bool:
        """True when the end of ``first`` and the start of ``last`` share a line.

        Missing tokens are never on any line.
        """
        if first.is_missing or last.is_missing:
            return False
        return self.line_index(first.span.end) == self.line_index(last.span.start)
