"""
Paginator: lazily walks a provider's pages for one query.
"""

from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

from models.schema import ResultPage

from .client import SearchProvider
from .errors import PaginationTermination, ProviderError

logger = logging.getLogger(__name__)


class Paginator:
    """
    Finite, single-use iterator of ResultPage for one query.

    Stops when a page comes back empty or reports no more pages. A provider
    failure either yields one error page and stops (search-style providers)
    or ends iteration silently (maps-style providers, page >= 1). A maps
    failure on the very first page is re-raised.

    Usage:
        for page in Paginator(provider, "coffee", location="Singapore"):
            ...
    """

    def __init__(
        self,
        provider: SearchProvider,
        query: str,
        location: Optional[str] = None,
        language: Optional[str] = None,
        ll: Optional[str] = None,
        page_delay: float = 1.0,
    ):
        self._provider = provider
        self._query = query
        self._options = {"location": location, "language": language, "ll": ll}
        self._page_delay = page_delay
        self._pages = self._walk()

    def __iter__(self) -> Iterator[ResultPage]:
        return self

    def __next__(self) -> ResultPage:
        return next(self._pages)

    def _walk(self) -> Iterator[ResultPage]:
        page = 0
        while True:
            try:
                result = self._fetch(page)
            except PaginationTermination:
                return
            except ProviderError as e:
                if self._provider.errors_end_pagination:
                    raise
                logger.error("Error fetching page %d for query %r: %s", page, self._query, e)
                yield self._provider.create_error_page(self._query, page, str(e))
                return

            yield result

            if not result.has_more_pages:
                return
            page += 1
            if self._page_delay > 0:
                time.sleep(self._page_delay)

    def _fetch(self, page: int) -> ResultPage:
        try:
            result = self._provider.search(self._query, page=page, **self._options)
        except ProviderError as e:
            if self._provider.errors_end_pagination and page > 0:
                logger.info(
                    "Reached end of pages for query %r at page %d (API error: %s)",
                    self._query, page, e,
                )
                raise PaginationTermination() from e
            raise

        if not result.items:
            logger.debug("Empty page %d for query %r, stopping", page, self._query)
            raise PaginationTermination()
        return result
