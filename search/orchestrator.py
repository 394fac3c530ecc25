"""
Query Orchestrator.

Ties together a SearchProvider, the Paginator and the domain matcher into a
batch workflow that, for each query:

  1. Walks result pages until a stop condition
  2. Either persists every page (no target domain) or hunts for the first
     ranked occurrence of each target domain
  3. Emits exactly one terminal outcome per query

Queries run strictly one after another; one failing query never aborts the
batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from models.enums import QueryState
from models.schema import (
    MatchResult,
    PageRecord,
    ProcessedQuery,
    QuerySummary,
    RunState,
    SearchItem,
    utc_now_iso,
)
from storage.state import StateStore
from storage.writer import ResultSink

from .client import SearchProvider
from .domain_match import find_first_domain_match, normalize_domain
from .paginator import Paginator

logger = logging.getLogger(__name__)


@dataclass
class QueryOutcome:
    """Terminal result of one query."""

    query: str
    state: QueryState = QueryState.SCANNING
    total_results: int = 0
    page_count: int = 0
    summaries: List[QuerySummary] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RunReport:
    """Outcome of a batch of queries."""

    outcomes: List[QueryOutcome] = field(default_factory=list)
    total_results: int = 0
    total_queries: int = 0
    resumed_from: int = 0

    @property
    def failed(self) -> List[QueryOutcome]:
        return [o for o in self.outcomes if o.state == QueryState.ERRORED]


class QueryOrchestrator:
    """
    Run queries against a provider and report rankings.

    Usage:
        orch = QueryOrchestrator(
            provider=create_provider("serper", "search", api_key="..."),
            sink=ResultWriter("./output"),
            domains=["example.com"],
            max_results=100,
        )
        report = orch.run(["best coffee singapore"])
    """

    def __init__(
        self,
        provider: SearchProvider,
        sink: ResultSink,
        domains: Optional[Sequence[str]] = None,
        max_results: int = 500,
        location: Optional[str] = None,
        language: Optional[str] = None,
        ll: Optional[str] = None,
        page_delay: float = 1.0,
        state_store: Optional[StateStore] = None,
    ):
        if max_results < 0:
            raise ValueError("max_results must be >= 0 (0 = unlimited)")
        self._provider = provider
        self._sink = sink
        self._max_results = max_results
        self._location = location
        self._language = language
        self._ll = ll
        self._page_delay = page_delay
        self._state_store = state_store
        self._targets = _dedupe_targets(domains or [])

    @property
    def domain_mode(self) -> bool:
        return bool(self._targets)

    @property
    def unlimited(self) -> bool:
        return self._max_results == 0

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def run(self, queries: Sequence[str]) -> RunReport:
        """Process every query in order, resuming from a checkpoint if present."""
        state = self._state_store.load() if self._state_store else RunState()
        start = state.current_query_index
        if start > len(queries):
            logger.warning("Checkpoint index %d beyond %d queries, starting over", start, len(queries))
            state = RunState()
            start = 0
        elif start:
            logger.info("Resuming at query %d of %d", start + 1, len(queries))

        report = RunReport(resumed_from=start)

        for index in range(start, len(queries)):
            query = queries[index]
            logger.info("Processing query %d/%d: %r", index + 1, len(queries), query)
            outcome = self.run_query(query)

            report.outcomes.append(outcome)
            report.total_results += outcome.total_results
            report.total_queries += 1

            state.processed_queries.append(
                ProcessedQuery(
                    query=query,
                    total_results=outcome.total_results,
                    page_count=outcome.page_count,
                    state=outcome.state,
                    error=outcome.error,
                )
            )
            state.total_results += outcome.total_results
            state.current_query_index = index + 1
            if self._state_store:
                self._state_store.on_query_complete(state)

        if self._state_store:
            self._state_store.clear()
        logger.info(
            "Finished %d queries (%d results, %d failed)",
            report.total_queries, report.total_results, len(report.failed),
        )
        return report

    # ------------------------------------------------------------------
    # Single query
    # ------------------------------------------------------------------

    def run_query(self, query: str) -> QueryOutcome:
        """Scan one query to its terminal state and emit its records."""
        outcome = QueryOutcome(query=query)
        matches: Dict[str, Optional[MatchResult]] = {
            target: None for _, target in self._targets
        }

        paginator = Paginator(
            self._provider,
            query,
            location=self._location,
            language=self._language,
            ll=self._ll,
            page_delay=self._page_delay,
        )

        try:
            for page in paginator:
                outcome.page_count += 1

                if page.is_error:
                    outcome.state = QueryState.ERRORED
                    outcome.error = page.error
                    if not self.domain_mode:
                        self._sink.write_page(
                            PageRecord(query=query, page=page.page, items=page.items)
                        )
                    break

                outcome.total_results += len(page.items)

                if self.domain_mode:
                    for target, match in matches.items():
                        if match is None:
                            matches[target] = find_first_domain_match(page.items, target)
                    if all(m is not None for m in matches.values()):
                        outcome.state = QueryState.FOUND
                        break
                else:
                    self._sink.write_page(
                        PageRecord(query=query, page=page.page, items=page.items)
                    )

                if self._budget_reached(outcome.total_results):
                    logger.debug("Result budget %d reached for %r", self._max_results, query)
                    outcome.state = QueryState.EXHAUSTED
                    break
            else:
                outcome.state = QueryState.COMPLETED
        except Exception as e:
            logger.error("Error processing query %r: %s", query, e)
            outcome.state = QueryState.ERRORED
            outcome.error = str(e)
            if not self.domain_mode:
                self._emit(self._sink.write_page, outcome, self._failure_record(query, str(e)))

        if self.domain_mode:
            outcome.summaries = self._finalize(query, matches, outcome)
            for (_, target), summary in zip(self._targets, outcome.summaries):
                self._emit(self._sink.write_summary, outcome, summary, target)

        logger.info(
            "Query %r finished: %s (%d results, %d pages)",
            query, outcome.state.value, outcome.total_results, outcome.page_count,
        )
        return outcome

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _emit(self, write: Callable[..., None], outcome: QueryOutcome, *records: Any) -> None:
        """Call a sink method; a failing sink fails only this query."""
        try:
            write(*records)
        except Exception as e:
            logger.error("Error writing results for query %r: %s", outcome.query, e)
            outcome.state = QueryState.ERRORED
            outcome.error = outcome.error or str(e)

    def _budget_reached(self, total: int) -> bool:
        return not self.unlimited and total >= self._max_results

    def _unfound_rank(self, outcome: QueryOutcome) -> Optional[str]:
        """
        Rank for a target that never matched.

        Zero results is reported like an exhausted budget; an error mid-scan
        is indistinguishable from one.
        """
        sentinel = f">{self._max_results}"
        if outcome.state in (QueryState.EXHAUSTED, QueryState.ERRORED):
            return sentinel
        if not self.unlimited and outcome.total_results == 0:
            return sentinel
        return None

    def _finalize(
        self,
        query: str,
        matches: Dict[str, Optional[MatchResult]],
        outcome: QueryOutcome,
    ) -> List[QuerySummary]:
        summaries: List[QuerySummary] = []
        for raw, target in self._targets:
            match = matches.get(target)
            if match is not None:
                summaries.append(
                    QuerySummary(
                        keyword=query,
                        domain=raw,
                        link=match.link,
                        title=match.title,
                        rank=match.position,
                    )
                )
            else:
                summaries.append(
                    QuerySummary(keyword=query, domain=raw, rank=self._unfound_rank(outcome))
                )
        return summaries

    @staticmethod
    def _failure_record(query: str, error: str) -> PageRecord:
        item = SearchItem(title="", snippet="", link="", position=0, query=query, page=0, error=error)
        return PageRecord(query=query, page=0, timestamp=utc_now_iso(), items=[item])


def _dedupe_targets(domains: Sequence[str]) -> List[Tuple[str, str]]:
    """(as given, normalized) pairs, first spelling wins for duplicates."""
    seen = set()
    targets: List[Tuple[str, str]] = []
    for raw in domains:
        target = normalize_domain(raw)
        if not target or target in seen:
            continue
        seen.add(target)
        targets.append((raw, target))
    return targets
