"""
Serper.dev providers (Google search and Google Maps).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from models.enums import ProviderMode
from models.schema import PlaceItem, ResultPage, SearchItem

from .client import RESULTS_PER_PAGE, RateLimitInfo, SearchProvider
from .locations import normalize_location


class _SerperProvider(SearchProvider):
    """Request shape shared by the Serper endpoints."""

    def build_request(
        self,
        query: str,
        page: int,
        location: Optional[str],
        language: Optional[str],
        ll: Optional[str],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "q": query,
            "page": page + 1,  # Serper pages are 1-based
        }
        gl = normalize_location(location)
        if gl:
            body["gl"] = gl
        if language:
            body["hl"] = language
        return body

    def rate_limit_info(self) -> RateLimitInfo:
        return RateLimitInfo(requests_per_minute=60, requests_per_day=1000)


# ------------------------------------------------------------------
# Organic search
# ------------------------------------------------------------------

class SerperSearchProvider(_SerperProvider):
    """Organic Google results via https://serper.dev."""

    API_URL = "https://google.serper.dev/search"

    @property
    def name(self) -> str:
        return "Serper.dev (Search)"

    @property
    def mode(self) -> ProviderMode:
        return ProviderMode.SEARCH

    def normalize_results(self, data: Dict[str, Any], query: str, page: int) -> ResultPage:
        items: List[SearchItem] = []
        for index, item in enumerate(_records(data, "organic")):
            items.append(
                SearchItem(
                    title=item.get("title") or "",
                    snippet=item.get("snippet") or "",
                    link=item.get("link") or "",
                    position=page * RESULTS_PER_PAGE + index + 1,
                    query=query,
                    page=page + 1,
                )
            )

        info = data.get("searchInformation")
        if not isinstance(info, dict):
            info = {}
        return ResultPage(
            items=items,
            query=query,
            page=page + 1,
            total_results=_to_int(info.get("totalResults")),
            has_more_pages=len(items) == RESULTS_PER_PAGE,
            provider=self.name,
            mode=self.mode,
        )


# ------------------------------------------------------------------
# Maps listings
# ------------------------------------------------------------------

class SerperMapsProvider(_SerperProvider):
    """Google Maps listings via https://serper.dev."""

    API_URL = "https://google.serper.dev/maps"
    errors_end_pagination = True

    @property
    def name(self) -> str:
        return "Serper.dev (Maps)"

    @property
    def mode(self) -> ProviderMode:
        return ProviderMode.MAPS

    def build_request(
        self,
        query: str,
        page: int,
        location: Optional[str],
        language: Optional[str],
        ll: Optional[str],
    ) -> Dict[str, Any]:
        body = super().build_request(query, page, location, language, ll)
        if ll:
            body["ll"] = ll
        return body

    def normalize_results(self, data: Dict[str, Any], query: str, page: int) -> ResultPage:
        items: List[PlaceItem] = []
        for index, item in enumerate(_records(data, "places")):
            items.append(
                PlaceItem(
                    position=page * RESULTS_PER_PAGE + index + 1,
                    title=item.get("title") or "",
                    address=item.get("address") or "",
                    latitude=item.get("latitude") or "",
                    longitude=item.get("longitude") or "",
                    rating=item.get("rating") or "",
                    rating_count=item.get("ratingCount") or "",
                    type=item.get("type") or "",
                    types=item.get("types") or [],
                    website=item.get("website") or "",
                    phone_number=item.get("phoneNumber") or "",
                    opening_hours=item.get("openingHours") or {},
                    thumbnail_url=item.get("thumbnailUrl") or "",
                    cid=str(item.get("cid") or ""),
                    fid=str(item.get("fid") or ""),
                    place_id=item.get("placeId") or "",
                    query=query,
                    page=page + 1,
                )
            )

        # No total-count field: continue as long as listings keep coming.
        return ResultPage(
            items=items,
            query=query,
            page=page + 1,
            total_results=0,
            has_more_pages=len(items) > 0,
            provider=self.name,
            mode=self.mode,
        )


def _to_int(raw: Any) -> int:
    """Serper sometimes reports totals as strings like '1,230,000'."""
    if raw is None:
        return 0
    try:
        return int(str(raw).replace(",", ""))
    except ValueError:
        return 0


def _records(data: Any, key: str) -> List[Dict[str, Any]]:
    """List of result objects under ``key``; ValueError on a malformed response."""
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected response type: {type(data).__name__}")
    records = data.get(key) or []
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError(f"Malformed '{key}' field in response")
    return records
