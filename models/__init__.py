"""
Models package initialization.
"""

from .enums import ProviderMode, MatchTier, QueryState
from .schema import (
    SearchItem,
    PlaceItem,
    ResultItem,
    ResultPage,
    MatchResult,
    QuerySummary,
    PageRecord,
    ProcessedQuery,
    RunState,
)

__all__ = [
    "ProviderMode",
    "MatchTier",
    "QueryState",
    "SearchItem",
    "PlaceItem",
    "ResultItem",
    "ResultPage",
    "MatchResult",
    "QuerySummary",
    "PageRecord",
    "ProcessedQuery",
    "RunState",
]
