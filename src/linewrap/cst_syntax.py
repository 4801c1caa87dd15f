from __future__ import annotations

import io
import tokenize
from bisect import bisect_left
from typing import Mapping

import libcst as cst
from libcst.metadata import CodeRange, MetadataWrapper, PositionProvider

from linewrap.exceptions import SourceParseError
from linewrap.syntax import SyntaxNode, SyntaxToken
from linewrap.text import SourceText, TextSpan

_TRIVIA_TOKEN_TYPES = frozenset(
    {
        tokenize.ENCODING,
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
    }
)


class _EnclosingNodeCollector(cst.CSTVisitor):
    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self, index: "PythonSyntaxIndex", offset: int) -> None:
        super().__init__()
        self.index = index
        self.offset = offset
        self.depth = 0
        self.found: list[tuple[int, cst.CSTNode]] = []

    def on_visit(self, node: cst.CSTNode) -> bool:
        # on_leave runs even for pruned nodes, so depth moves first.
        self.depth += 1
        code_range = self.get_metadata(PositionProvider, node, None)
        if code_range is not None:
            span = self.index.span_of_range(code_range)
            if span.is_empty or not span.start <= self.offset <= span.end:
                return False
            self.found.append((self.depth, node))
        return True

    def on_leave(self, original_node: cst.CSTNode) -> None:
        self.depth -= 1


class PythonSyntaxIndex:
    """libcst tree plus token stream for one immutable source snapshot.

    Bridges libcst nodes to the span-bearing ``SyntaxNode``/``SyntaxToken``
    elements the wrapping core inspects.
    """

    def __init__(
        self,
        text: SourceText,
        wrapper: MetadataWrapper,
        tokens: tuple[SyntaxToken, ...],
        comments: tuple[SyntaxToken, ...],
    ) -> None:
        self.text = text
        self.wrapper = wrapper
        self.tokens = tokens
        self.comments = comments
        self._token_starts = [token.span.start for token in tokens]
        self._ranges: Mapping[cst.CSTNode, CodeRange] = wrapper.resolve(PositionProvider)

    @classmethod
    def parse(cls, text: SourceText) -> "PythonSyntaxIndex":
        try:
            module = cst.parse_module(text.text)
        except cst.ParserSyntaxError as exc:
            raise SourceParseError(f"LibCST parse failed: {exc}") from exc
        tokens, comments = _tokenize(text)
        return cls(text, MetadataWrapper(module), tokens, comments)

    def span_of_range(self, code_range: CodeRange) -> TextSpan:
        start = self.text.offset_of(code_range.start.line - 1, code_range.start.column)
        end = self.text.offset_of(code_range.end.line - 1, code_range.end.column)
        return TextSpan.from_bounds(start, max(start, end))

    def span_of(self, node: cst.CSTNode) -> TextSpan | None:
        code_range = self._ranges.get(node)
        if code_range is None:
            return None
        return self.span_of_range(code_range)

    def element_for(self, node: cst.CSTNode) -> SyntaxNode | None:
        span = self.span_of(node)
        if span is None:
            return None
        return SyntaxNode(kind=type(node).__name__, span=span, tokens=self.tokens_in(span))

    def tokens_in(self, span: TextSpan) -> tuple[SyntaxToken, ...]:
        found: list[SyntaxToken] = []
        for position in range(bisect_left(self._token_starts, span.start), len(self.tokens)):
            token = self.tokens[position]
            if token.span.start >= span.end or token.span.end > span.end:
                break
            found.append(token)
        return tuple(found)

    def has_comments_in(self, span: TextSpan) -> bool:
        return any(span.contains_span(comment.span) for comment in self.comments)

    def ancestors_at(self, offset: int) -> list[cst.CSTNode]:
        """Nodes whose range contains ``offset``, innermost first."""
        collector = _EnclosingNodeCollector(self, offset)
        self.wrapper.visit(collector)
        ordered = sorted(enumerate(collector.found), key=lambda item: (-item[1][0], -item[0]))
        return [node for _, (_, node) in ordered]


def _tokenize(text: SourceText) -> tuple[tuple[SyntaxToken, ...], tuple[SyntaxToken, ...]]:
    tokens: list[SyntaxToken] = []
    comments: list[SyntaxToken] = []
    try:
        for raw in tokenize.generate_tokens(io.StringIO(text.text).readline):
            if raw.type in _TRIVIA_TOKEN_TYPES:
                continue
            start = text.offset_of(raw.start[0] - 1, raw.start[1])
            end = text.offset_of(raw.end[0] - 1, raw.end[1])
            token = SyntaxToken(
                kind=tokenize.tok_name[raw.type],
                text=raw.string,
                span=TextSpan.from_bounds(start, max(start, end)),
            )
            if raw.type == tokenize.COMMENT:
                comments.append(token)
            else:
                tokens.append(token)
    except (tokenize.TokenError, SyntaxError) as exc:
        raise SourceParseError(f"Tokenize failed: {exc}") from exc
    return tuple(tokens), tuple(comments)
