"""
SearchProvider ABC shared by every result provider.

A provider turns (query, page) into one normalized ResultPage:

  - builds the provider-native request body
  - POSTs it with a linear-backoff retry loop
  - normalizes the JSON response into the result contract

Concrete providers live in ``search.serper``.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from models.enums import ProviderMode
from models.schema import ResultPage, SearchItem

from .errors import ProviderError

logger = logging.getLogger(__name__)

RESULTS_PER_PAGE = 10


@dataclass
class RateLimitInfo:
    """Published request quota of a provider (None = unknown)."""

    requests_per_minute: Optional[int] = None
    requests_per_day: Optional[int] = None
    remaining_requests: Optional[int] = None


# ------------------------------------------------------------------
# Abstract provider
# ------------------------------------------------------------------

class SearchProvider(ABC):
    """Abstract paged search interface."""

    API_URL: str = ""

    # Maps-style providers have no total-count signal and commonly fail
    # at the natural end of pagination.
    errors_end_pagination: bool = False

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
    ):
        if not api_key:
            raise ValueError(f"{type(self).__name__} requires an api_key")
        if max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        self._api_key = api_key
        self.max_retries = max_retries
        self.retry_delay = retry_delay  # seconds, multiplied by attempt number
        self.timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def mode(self) -> ProviderMode:
        ...

    @abstractmethod
    def build_request(
        self,
        query: str,
        page: int,
        location: Optional[str],
        language: Optional[str],
        ll: Optional[str],
    ) -> Dict[str, Any]:
        """Provider-native request body for a 0-based page index."""
        ...

    @abstractmethod
    def normalize_results(self, data: Dict[str, Any], query: str, page: int) -> ResultPage:
        """Convert a raw response into a ResultPage."""
        ...

    def rate_limit_info(self) -> RateLimitInfo:
        return RateLimitInfo()

    def search(
        self,
        query: str,
        page: int = 0,
        location: Optional[str] = None,
        language: Optional[str] = None,
        ll: Optional[str] = None,
    ) -> ResultPage:
        """
        Fetch and normalize one page (0-based index).

        Raises:
            ProviderError: after ``max_retries`` failed attempts
        """
        if page < 0:
            raise ValueError("page must be >= 0")

        body = self.build_request(query, page, location, language, ll)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                data = self._post(body)
                return self.normalize_results(data, query, page)
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(
                    "Attempt %d/%d failed for %s query %r, page %d: %s",
                    attempt, self.max_retries, self.mode.value, query, page, _describe(e),
                )
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay * attempt)

        raise ProviderError(
            f'Failed to fetch {self.mode.value} results for query "{query}", page {page} '
            f"after {self.max_retries} attempts. Last error: {_describe(last_error)}",
            query=query,
            page=page,
            cause=last_error,
        ) from last_error

    def create_error_page(self, query: str, page: int, error: str) -> ResultPage:
        """Synthetic one-item page reporting a failed fetch of ``page`` (0-based)."""
        item = SearchItem(
            title="",
            snippet="",
            link="",
            position=page * RESULTS_PER_PAGE + 1,
            query=query,
            page=page + 1,
            error=error,
        )
        return ResultPage(
            items=[item],
            query=query,
            page=page + 1,
            total_results=0,
            has_more_pages=False,
            provider=self.name,
            mode=self.mode,
            error=error,
        )

    def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "X-API-KEY": self._api_key,
            "Content-Type": "application/json",
        }
        with httpx.Client(timeout=self.timeout) as client:
            resp = client.post(self.API_URL, json=body, headers=headers)
            resp.raise_for_status()
            return resp.json()


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _describe(error: Optional[BaseException]) -> str:
    """Short human-readable form of a fetch error."""
    if error is None:
        return "unknown error"
    if isinstance(error, httpx.HTTPStatusError):
        return f"HTTP {error.response.status_code}: {error.response.text}"
    return str(error) or type(error).__name__
