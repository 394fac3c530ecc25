"""
Search module: paged provider calls, domain rank matching and the
per-query orchestration that ties them together.
"""

from .errors import ProviderError, PaginationTermination
from .client import SearchProvider, RateLimitInfo, RESULTS_PER_PAGE
from .serper import SerperSearchProvider, SerperMapsProvider
from .registry import ProviderRegistry, get_registry, create_provider
from .domain_match import normalize_domain, extract_hostname, find_first_domain_match
from .paginator import Paginator
from .orchestrator import QueryOrchestrator, QueryOutcome, RunReport

__all__ = [
    "ProviderError",
    "PaginationTermination",
    "SearchProvider",
    "RateLimitInfo",
    "RESULTS_PER_PAGE",
    "SerperSearchProvider",
    "SerperMapsProvider",
    "ProviderRegistry",
    "get_registry",
    "create_provider",
    "normalize_domain",
    "extract_hostname",
    "find_first_domain_match",
    "Paginator",
    "QueryOrchestrator",
    "QueryOutcome",
    "RunReport",
]
