from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from linewrap.text import TextSpan


@dataclass(frozen=True)
class SyntaxToken:
    kind: str
    text: str
    span: TextSpan

    @property
    def is_token(self) -> bool:
        return True

    @property
    def is_missing(self) -> bool:
        return not self.text and self.span.is_empty

    def as_token(self) -> "SyntaxToken":
        return self

    def first_token(self) -> "SyntaxToken":
        return self

    def last_token(self) -> "SyntaxToken":
        return self


@dataclass(frozen=True)
class SyntaxNode:
    """Composite source element covering a run of tokens."""

    kind: str
    span: TextSpan
    tokens: tuple[SyntaxToken, ...] = ()

    @property
    def is_token(self) -> bool:
        return False

    def as_node(self) -> "SyntaxNode":
        return self

    def first_token(self) -> SyntaxToken | None:
        return self.tokens[0] if self.tokens else None

    def last_token(self) -> SyntaxToken | None:
        return self.tokens[-1] if self.tokens else None


SyntaxElement: TypeAlias = SyntaxNode | SyntaxToken


def boundary_tokens(
    element: SyntaxElement,
) -> tuple[SyntaxToken | None, SyntaxToken | None]:
    if element.is_token:
        token = element.as_token()
        return token, token
    node = element.as_node()
    return node.first_token(), node.last_token()
