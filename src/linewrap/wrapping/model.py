from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Position = Tuple[int, int]

REFACTOR_REWRITE_KIND = "refactor.rewrite"


@dataclass(frozen=True)
class TextEdit:
    path: str
    start: Position
    end: Position
    replacement: str


@dataclass(frozen=True)
class CandidateAction:
    """One offered rewrite.

    ``sort_title`` lets an action rank under a different key than the title
    shown to the user; when absent the title is the ranking key.
    """

    title: str
    sort_title: str | None = None
    edits: tuple[TextEdit, ...] = ()
    kind: str = REFACTOR_REWRITE_KIND

    @property
    def identity_title(self) -> str:
        if self.sort_title is not None:
            return self.sort_title
        return self.title
