"""
Exceptions raised by search providers and the paginator.
"""

from typing import Optional


class ProviderError(Exception):
    """A single page fetch failed after the provider's retry budget."""

    def __init__(
        self,
        message: str,
        query: str = "",
        page: int = 0,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.query = query
        self.page = page
        self.cause = cause


class PaginationTermination(Exception):
    """Natural end of results; never escapes the paginator."""
