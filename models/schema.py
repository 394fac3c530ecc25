"""
Pydantic data models for normalized search results.

Attributes are snake_case in Python; records are serialized with the
camelCase keys consumers of the output files expect.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from .enums import ProviderMode, MatchTier, QueryState


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class RecordModel(BaseModel):
    """Base for every model that ends up in an output record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return self.model_dump(mode='json', by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from dictionary (JSON import)."""
        return cls.model_validate(data)


class SearchItem(RecordModel):
    """One ranked organic result."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Example Domain",
                "snippet": "This domain is for use in illustrative examples.",
                "link": "https://example.com/",
                "position": 1,
                "query": "example",
                "page": 1,
                "error": None,
            }
        },
    )

    title: str = Field("", description="Result title")
    snippet: str = Field("", description="Result snippet")
    link: str = Field("", description="Result URL")
    position: int = Field(..., ge=0, description="Absolute rank across all pages")
    query: str = Field(..., description="Query that produced the result")
    page: int = Field(..., ge=0, description="1-based page number")
    error: Optional[str] = Field(None, description="Error message for failure records")

    @model_validator(mode='after')
    def validate_rank(self) -> 'SearchItem':
        """Only failure records may carry a zero position or page."""
        if self.error is None and (self.position < 1 or self.page < 1):
            raise ValueError("position and page must be >= 1 for regular results")
        return self


class PlaceItem(RecordModel):
    """One maps listing."""

    model_config = ConfigDict(frozen=True)

    position: Optional[int] = Field(None, description="Absolute rank across all pages")
    title: str = ""
    address: str = ""
    latitude: Union[float, str] = ""
    longitude: Union[float, str] = ""
    rating: Union[float, str] = ""
    rating_count: Union[int, str] = ""
    type: str = ""
    types: List[str] = Field(default_factory=list)
    website: str = ""
    phone_number: str = ""
    opening_hours: Dict[str, Any] = Field(default_factory=dict)
    thumbnail_url: str = ""
    cid: str = ""
    fid: str = ""
    place_id: str = ""
    query: str = Field(..., description="Query that produced the listing")
    page: int = Field(..., ge=1, description="1-based page number")
    error: Optional[str] = None

    @property
    def link(self) -> str:
        """Website of the listing, used for domain matching."""
        return self.website


ResultItem = Union[SearchItem, PlaceItem]


class ResultPage(RecordModel):
    """Normalized page of results from one provider call."""

    items: List[ResultItem] = Field(default_factory=list)
    query: str
    page: int = Field(..., ge=1, description="1-based page number")
    total_results: int = Field(0, ge=0)
    has_more_pages: bool = False
    provider: str
    mode: ProviderMode = ProviderMode.SEARCH
    timestamp: str = Field(default_factory=utc_now_iso)
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class MatchResult(RecordModel):
    """First item in a batch whose hostname matched the target domain."""

    model_config = ConfigDict(frozen=True)

    link: str
    title: str
    position: int
    tier: MatchTier


class QuerySummary(RecordModel):
    """Domain-mode result for one (query, domain) pair."""

    keyword: str
    domain: str
    link: Optional[str] = None
    title: Optional[str] = None
    rank: Union[int, str, None] = Field(
        None, description="Match position, '>maxResults' sentinel, or null"
    )
    timestamp: str = Field(default_factory=utc_now_iso)

    @property
    def found(self) -> bool:
        return isinstance(self.rank, int)


class PageRecord(RecordModel):
    """Non-domain output record: one page of items."""

    query: str
    page: int = Field(..., ge=0)
    timestamp: str = Field(default_factory=utc_now_iso)
    items: List[ResultItem] = Field(default_factory=list)


class ProcessedQuery(RecordModel):
    """Checkpoint entry for a finished query."""

    query: str
    total_results: int = 0
    page_count: int = 0
    state: QueryState = QueryState.COMPLETED
    error: Optional[str] = None
    finished_at: str = Field(default_factory=utc_now_iso)


class RunState(RecordModel):
    """Resumable progress of a batch run."""

    processed_queries: List[ProcessedQuery] = Field(default_factory=list)
    current_query_index: int = Field(0, ge=0)
    total_results: int = Field(0, ge=0)
    start_time: str = Field(default_factory=utc_now_iso)
    last_saved: Optional[str] = None
