from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from linewrap.wrapping.model import REFACTOR_REWRITE_KIND, CandidateAction, TextEdit


class TextEditDTO(BaseModel):
    path: str
    start: Tuple[int, int]
    end: Tuple[int, int]
    replacement: str


class CandidateActionDTO(BaseModel):
    title: str = Field(min_length=1)
    sort_title: Optional[str] = None
    kind: str = REFACTOR_REWRITE_KIND
    edits: List[TextEditDTO] = []

    @classmethod
    def from_action(cls, action: CandidateAction) -> "CandidateActionDTO":
        return cls(
            title=action.title,
            sort_title=action.sort_title,
            kind=action.kind,
            edits=[
                TextEditDTO(
                    path=edit.path,
                    start=edit.start,
                    end=edit.end,
                    replacement=edit.replacement,
                )
                for edit in action.edits
            ],
        )

    def to_action(self) -> CandidateAction:
        return CandidateAction(
            title=self.title,
            sort_title=self.sort_title,
            kind=self.kind,
            edits=tuple(
                TextEdit(
                    path=edit.path,
                    start=edit.start,
                    end=edit.end,
                    replacement=edit.replacement,
                )
                for edit in self.edits
            ),
        )


class RecordInvocationRequest(BaseModel):
    title: str = Field(min_length=1)


class RecordInvocationResponse(BaseModel):
    exit_code: int = 0
    history: List[str] = []
    errors: List[str] = []


class RankRequest(BaseModel):
    actions: List[CandidateActionDTO]
    history: Optional[List[str]] = None


class RankResponse(BaseModel):
    exit_code: int = 0
    actions: List[CandidateActionDTO] = []
    errors: List[str] = []
