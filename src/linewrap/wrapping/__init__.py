from linewrap.wrapping.eligibility import (
    contains_unformattable_content,
    has_unformattable_content,
)
from linewrap.wrapping.history import UsageHistoryStore, default_history_store
from linewrap.wrapping.model import CandidateAction, TextEdit
from linewrap.wrapping.ranking import rank_actions
from linewrap.wrapping.wrapper import AbstractWrapper, ActionComputer

__all__ = [
    "AbstractWrapper",
    "ActionComputer",
    "CandidateAction",
    "TextEdit",
    "UsageHistoryStore",
    "contains_unformattable_content",
    "default_history_store",
    "has_unformattable_content",
    "rank_actions",
]
