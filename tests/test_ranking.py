from __future__ import annotations

from itertools import permutations

from linewrap.wrapping.model import CandidateAction
from linewrap.wrapping.ranking import rank_actions


def _titles(actions) -> list[str]:
    return [action.title for action in actions]


def _actions(*titles: str) -> list[CandidateAction]:
    return [CandidateAction(title=title) for title in titles]


def test_rank_orders_invoked_actions_by_recency() -> None:
    ranked = rank_actions(_actions("A", "B", "C"), ["B", "A"])
    assert _titles(ranked) == ["B", "A", "C"]


def test_rank_with_empty_history_keeps_input_order() -> None:
    assert _titles(rank_actions(_actions("A", "B"), [])) == ["A", "B"]


def test_rank_without_matches_keeps_input_order() -> None:
    assert _titles(rank_actions(_actions("Y", "Z"), ["X"])) == ["Y", "Z"]


def test_rank_places_found_before_absent_regardless_of_position() -> None:
    ranked = rank_actions(_actions("A", "B", "C", "D"), ["D"])
    assert _titles(ranked) == ["D", "A", "B", "C"]


def test_rank_uses_sort_title_over_display_title() -> None:
    actions = [
        CandidateAction(title="Unwrap all arguments of 'f'", sort_title="Unwrap all arguments"),
        CandidateAction(title="Wrap every argument of 'f'", sort_title="Wrap every argument"),
    ]
    ranked = rank_actions(actions, ["Wrap every argument"])
    assert _titles(ranked) == ["Wrap every argument of 'f'", "Unwrap all arguments of 'f'"]
    assert actions[0].identity_title == "Unwrap all arguments"
    assert CandidateAction(title="plain").identity_title == "plain"


def test_rank_breaks_duplicate_title_ties_by_input_position() -> None:
    first = CandidateAction(title="first", sort_title="shared")
    second = CandidateAction(title="second", sort_title="shared")
    other = CandidateAction(title="other")
    assert rank_actions([other, first, second], ["shared"]) == (first, second, other)
    assert rank_actions([other, second, first], ["shared"]) == (second, first, other)


def test_rank_keeps_equal_absent_actions_in_input_order() -> None:
    left = CandidateAction(title="same")
    right = CandidateAction(title="same", sort_title=None, kind="refactor.other")
    assert rank_actions([right, left], []) == (right, left)


def test_rank_uses_first_occurrence_of_duplicate_history_titles() -> None:
    ranked = rank_actions(_actions("A", "B"), ["B", "A", "B"])
    assert _titles(ranked) == ["B", "A"]


def test_rank_does_not_mutate_inputs() -> None:
    actions = _actions("A", "B", "C")
    history = ["C"]
    ranked = rank_actions(actions, history)
    assert isinstance(ranked, tuple)
    assert _titles(actions) == ["A", "B", "C"]
    assert history == ["C"]
    assert _titles(ranked) == ["C", "A", "B"]


def test_rank_is_a_permutation_honouring_every_pairwise_rule() -> None:
    history = ["c", "a", "x"]
    for order in permutations(["a", "b", "c", "d", "e"]):
        ranked = _titles(rank_actions(_actions(*order), history))
        assert sorted(ranked) == sorted(order)
        assert ranked[:2] == ["c", "a"]
        absent = [title for title in order if title not in history]
        assert ranked[2:] == absent
