from __future__ import annotations

import logging
from typing import Sequence

from linewrap.cancellation import CancellationToken, resolve_cancellation
from linewrap.config import WrappingConfig
from linewrap.document import Document
from linewrap.exceptions import SourceParseError
from linewrap.wrapping.call_arguments import CallArgumentWrapper
from linewrap.wrapping.history import UsageHistoryStore
from linewrap.wrapping.model import CandidateAction
from linewrap.wrapping.wrapper import AbstractWrapper

log = logging.getLogger(__name__)


class WrappingService:
    """Runs the registered wrappers against the nodes enclosing a caret.

    Nodes are tried innermost first; for each node the wrappers are asked in
    registration order and the first one that produces a computer wins.
    """

    def __init__(self, wrappers: Sequence[AbstractWrapper]) -> None:
        self.wrappers = tuple(wrappers)

    async def get_actions(
        self,
        document: Document,
        position: int,
        cancellation: CancellationToken | None = None,
    ) -> tuple[CandidateAction, ...]:
        token = resolve_cancellation(cancellation)
        try:
            syntax = await document.get_syntax(token)
        except SourceParseError as exc:
            log.debug("no wrapping actions for %s: %s", document.uri, exc)
            return ()
        for node in syntax.ancestors_at(position):
            for wrapper in self.wrappers:
                token.raise_if_cancellation_requested()
                computer = await wrapper.try_create_computer(document, position, node, token)
                if computer is None:
                    continue
                log.debug(
                    "%s offers actions for %s at %s:%d",
                    type(wrapper).__name__,
                    type(node).__name__,
                    document.uri,
                    position,
                )
                return await computer.get_top_level_actions()
        return ()


def default_wrappers(
    config: WrappingConfig | None = None,
    history: UsageHistoryStore | None = None,
) -> list[AbstractWrapper]:
    return [CallArgumentWrapper(config=config, history=history)]


def build_service(
    config: WrappingConfig | None = None,
    history: UsageHistoryStore | None = None,
) -> WrappingService:
    return WrappingService(default_wrappers(config=config, history=history))
