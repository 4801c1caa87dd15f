from __future__ import annotations

from typing import Sequence

import libcst as cst

from linewrap.cancellation import CancellationToken
from linewrap.config import WrappingConfig
from linewrap.cst_syntax import PythonSyntaxIndex
from linewrap.document import Document
from linewrap.exceptions import SourceParseError
from linewrap.syntax import SyntaxNode, SyntaxToken
from linewrap.text import TextSpan
from linewrap.wrapping.history import UsageHistoryStore
from linewrap.wrapping.model import CandidateAction, TextEdit
from linewrap.wrapping.wrapper import AbstractWrapper, ActionComputer

UNWRAP_TITLE = "Unwrap all arguments"
WRAP_EVERY_TITLE = "Wrap every argument"
WRAP_LONG_TITLE = "Wrap long argument list"


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def _find_open_paren(
    syntax: PythonSyntaxIndex, func_span: TextSpan, call_span: TextSpan
) -> SyntaxToken | None:
    for token in syntax.tokens_in(TextSpan.from_bounds(func_span.end, call_span.end)):
        if token.text == "(":
            return token
    return None


class CallArgumentComputer(ActionComputer):
    def __init__(
        self,
        wrapper: "CallArgumentWrapper",
        document: Document,
        cancellation: CancellationToken | None,
        *,
        syntax: PythonSyntaxIndex,
        callee: str,
        open_paren: SyntaxToken,
        close_paren: SyntaxToken,
        items: Sequence[SyntaxNode],
    ) -> None:
        super().__init__(wrapper, document, cancellation)
        self.syntax = syntax
        self.callee = callee
        self.open_paren = open_paren
        self.close_paren = close_paren
        self.items = tuple(items)
        self.config = wrapper.config

    async def compute_actions(self) -> Sequence[CandidateAction]:
        text = self.syntax.text
        arguments = [text.slice(item.span) for item in self.items]
        list_span = TextSpan.from_bounds(self.open_paren.span.start, self.close_paren.span.end)
        current = text.slice(list_span)
        paren_position = text.position_of(self.open_paren.span.start)
        base_indent = _leading_whitespace(text.line_text(paren_position.line))
        if "\t" in base_indent:
            inner_indent = base_indent + "\t"
        else:
            inner_indent = base_indent + self.config.indent_unit
        newline = text.line_break(paren_position.line)

        candidates = (
            (UNWRAP_TITLE, "(" + ", ".join(arguments) + ")"),
            (WRAP_EVERY_TITLE, self._wrap_every(arguments, base_indent, inner_indent, newline)),
            (WRAP_LONG_TITLE, self._wrap_long(arguments, base_indent, inner_indent, newline)),
        )
        start = paren_position.as_tuple()
        end = text.position_of(list_span.end).as_tuple()
        seen = {current}
        actions: list[CandidateAction] = []
        for title, replacement in candidates:
            if replacement in seen:
                continue
            seen.add(replacement)
            edit = TextEdit(path=self.document.uri, start=start, end=end, replacement=replacement)
            actions.append(
                CandidateAction(
                    title=f"{title} of '{self.callee}'",
                    sort_title=title,
                    edits=(edit,),
                )
            )
        return actions

    def _wrap_every(
        self, arguments: list[str], base_indent: str, inner_indent: str, newline: str
    ) -> str:
        body = ("," + newline).join(inner_indent + argument for argument in arguments)
        if self.config.trailing_comma:
            body += ","
        return "(" + newline + body + newline + base_indent + ")"

    def _wrap_long(
        self, arguments: list[str], base_indent: str, inner_indent: str, newline: str
    ) -> str:
        lines: list[str] = []
        line = inner_indent + arguments[0]
        for argument in arguments[1:]:
            candidate = line + ", " + argument
            # Room for the trailing comma that ends a filled line.
            if len(candidate) + 1 <= self.config.max_line_length:
                line = candidate
                continue
            lines.append(line + ",")
            line = inner_indent + argument
        lines.append(line)
        return "(" + newline + newline.join(lines) + newline + base_indent + ")"


class CallArgumentWrapper(AbstractWrapper):
    """Offers wrap/unwrap rewrites for the argument list of a call."""

    def __init__(
        self,
        config: WrappingConfig | None = None,
        history: UsageHistoryStore | None = None,
    ) -> None:
        super().__init__(history=history)
        self.config = config if config is not None else WrappingConfig()

    async def try_create_computer(
        self,
        document: Document,
        position: int,
        node: cst.CSTNode,
        cancellation: CancellationToken | None = None,
    ) -> CallArgumentComputer | None:
        if type(node) is not cst.Call or not node.args:
            return None
        try:
            syntax = await document.get_syntax(cancellation)
        except SourceParseError:
            return None
        call_span = syntax.span_of(node)
        func_span = syntax.span_of(node.func)
        if call_span is None or func_span is None:
            return None
        open_paren = _find_open_paren(syntax, func_span, call_span)
        call_tokens = syntax.tokens_in(call_span)
        if open_paren is None or not call_tokens or call_tokens[-1].text != ")":
            return None
        close_paren = call_tokens[-1]
        if syntax.has_comments_in(TextSpan.from_bounds(open_paren.span.start, close_paren.span.end)):
            return None
        items = [syntax.element_for(argument) for argument in node.args]
        if await self.contains_unformattable_content(document, items, cancellation):
            return None
        return CallArgumentComputer(
            self,
            document,
            cancellation,
            syntax=syntax,
            callee=" ".join(syntax.text.slice(func_span).split()),
            open_paren=open_paren,
            close_paren=close_paren,
            items=[item for item in items if item is not None],
        )
