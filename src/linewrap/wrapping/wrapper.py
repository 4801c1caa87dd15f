from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

import libcst as cst

from linewrap.cancellation import CancellationToken, resolve_cancellation
from linewrap.document import Document, TextProvider
from linewrap.syntax import SyntaxElement
from linewrap.wrapping import eligibility
from linewrap.wrapping.history import UsageHistoryStore, default_history_store
from linewrap.wrapping.model import CandidateAction
from linewrap.wrapping.ranking import rank_actions


class ActionComputer(ABC):
    """Produces the candidate actions for one wrapper at one location."""

    def __init__(
        self,
        wrapper: "AbstractWrapper",
        document: Document,
        cancellation: CancellationToken | None = None,
    ) -> None:
        self.wrapper = wrapper
        self.document = document
        self.cancellation = resolve_cancellation(cancellation)

    @abstractmethod
    async def compute_actions(self) -> Sequence[CandidateAction]: ...

    async def get_top_level_actions(self) -> tuple[CandidateAction, ...]:
        actions = await self.compute_actions()
        self.cancellation.raise_if_cancellation_requested()
        return self.wrapper.sort_actions_by_most_recently_used(actions)


class AbstractWrapper(ABC):
    """Common base of all wrappers.

    Handles the logic shared by every syntactic form:

    1. Prioritizing actions the user picked before, using the usage history
       store. Most invocations pick one of a few actions out of the many
       offered, so those float to the top on later requests.

    2. Checking nodes and tokens to make sure they are safe to be wrapped.

    Subclasses target one syntactic form each (argument lists, binary
    expressions, ...) and decide in ``try_create_computer`` whether they
    apply to the node under the caret.
    """

    def __init__(self, history: UsageHistoryStore | None = None) -> None:
        self.history = history if history is not None else default_history_store()

    @abstractmethod
    async def try_create_computer(
        self,
        document: Document,
        position: int,
        node: cst.CSTNode,
        cancellation: CancellationToken | None = None,
    ) -> ActionComputer | None: ...

    def sort_actions_by_most_recently_used(
        self, actions: Sequence[CandidateAction]
    ) -> tuple[CandidateAction, ...]:
        return rank_actions(actions, self.history.snapshot())

    def record_invocation(self, action: CandidateAction) -> tuple[str, ...]:
        return self.history.record(action.identity_title)

    @staticmethod
    async def contains_unformattable_content(
        document: TextProvider,
        items: Iterable[SyntaxElement | None],
        cancellation: CancellationToken | None = None,
    ) -> bool:
        # For now, don't offer if any item spans multiple lines; moving those
        # would require fixing the indentation of their inner lines.
        return await eligibility.contains_unformattable_content(document, items, cancellation)
