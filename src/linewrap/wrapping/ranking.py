from __future__ import annotations

from functools import cmp_to_key
from typing import Sequence

from linewrap.wrapping.model import CandidateAction

_NOT_FOUND = -1


def rank_actions(
    actions: Sequence[CandidateAction],
    history: Sequence[str],
) -> tuple[CandidateAction, ...]:
    """Order ``actions`` so previously invoked ones come first.

    Actions found in ``history`` rank by how recently they were invoked and
    always precede actions never invoked. Everything else keeps its input
    order. The input position is the final comparison term, so the result does
    not depend on the sort being stable.
    """
    # Local copy so the history can't change out from under the sort.
    mru_titles = tuple(history)
    history_index: dict[str, int] = {}
    for index, title in enumerate(mru_titles):
        history_index.setdefault(title, index)

    indexed = [
        (position, history_index.get(action.identity_title, _NOT_FOUND), action)
        for position, action in enumerate(actions)
    ]

    def _compare(
        left: tuple[int, int, CandidateAction],
        right: tuple[int, int, CandidateAction],
    ) -> int:
        left_position, left_rank, _ = left
        right_position, right_rank, _ = right
        if left_rank >= 0 and right_rank >= 0:
            if left_rank != right_rank:
                return left_rank - right_rank
            # Duplicate identity titles share a rank.
            return left_position - right_position
        if left_rank >= 0:
            return -1
        if right_rank >= 0:
            return 1
        return left_position - right_position

    return tuple(action for _, _, action in sorted(indexed, key=cmp_to_key(_compare)))
