"""
Enumerations for search result models.
"""

from enum import Enum


class ProviderMode(str, Enum):
    """Kind of results a provider returns."""
    SEARCH = "search"
    MAPS = "maps"


class MatchTier(str, Enum):
    """How a result hostname matched a target domain."""
    EXACT = "exact"
    SUBDOMAIN = "subdomain"
    PARTIAL = "partial"


class QueryState(str, Enum):
    """Terminal (or current) state of a single query."""
    SCANNING = "scanning"
    FOUND = "found"
    EXHAUSTED = "exhausted"
    COMPLETED = "completed"
    ERRORED = "errored"
