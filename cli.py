"""
Command-line entry point: rank domains or dump SERP pages for a list of queries.

Examples:
    serp-rank -q "coffee singapore" --domain example.com -r 100
    serp-rank -q "dentist" -m maps -l Singapore -o ./output
    serp-rank -c config.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from search.orchestrator import QueryOrchestrator, RunReport
from search.registry import create_provider, get_registry
from settings import ConfigError, load_options
from storage.state import NullStateStore, StateStore
from storage.writer import ResultWriter

logger = logging.getLogger("serp_rank")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serp-rank",
        description="Query a SERP API page by page and report where target domains rank.",
    )
    parser.add_argument("-q", "--query", dest="queries", action="append",
                        help="Search query (repeatable).")
    parser.add_argument("--domain", dest="domains", action="append",
                        help="Target domain to rank (repeatable).")
    parser.add_argument("-p", "--provider", help="Provider name (default: serper).")
    parser.add_argument("-m", "--mode", choices=["search", "maps"], help="Result type.")
    parser.add_argument("-r", "--max-results", type=int,
                        help="Result budget per query, 0 = unlimited (default: 500).")
    parser.add_argument("-l", "--location", help="Location name or 2-letter country code.")
    parser.add_argument("--language", help="Interface language code (default: en).")
    parser.add_argument("-o", "--output", dest="output_dir", help="Output directory.")
    parser.add_argument("-k", "--provider-key", help="API key (else PROVIDER_KEY env var).")
    parser.add_argument("-c", "--config", help="JSON config file (default: ./config.json).")
    parser.add_argument("--ll", help="Map coordinates for maps mode, e.g. @1.29,103.85,14z.")
    parser.add_argument("--page-delay", type=float, help="Seconds between pages (default: 1).")
    parser.add_argument("--dataset", action="store_true", default=None,
                        help="Also append every record to dataset.jsonl.")
    parser.add_argument("--no-resume", dest="resume", action="store_false", default=None,
                        help="Ignore and discard any saved checkpoint.")
    parser.add_argument("--list-providers", action="store_true",
                        help="List available providers and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def list_providers() -> None:
    registry = get_registry()
    for option in registry.provider_options():
        modes = ", ".join(registry.mode_options(option["value"]))
        print(f"{option['value']:<10} {option['label']} (modes: {modes})")


def print_report(report: RunReport) -> None:
    for outcome in report.outcomes:
        if outcome.summaries:
            for s in outcome.summaries:
                rank = s.rank if s.rank is not None else "not found"
                print(f"{outcome.query!r} / {s.domain}: {rank}" + (f"  {s.link}" if s.link else ""))
        else:
            status = f"error: {outcome.error}" if outcome.error else outcome.state.value
            print(f"{outcome.query!r}: {outcome.total_results} results in {outcome.page_count} pages ({status})")
    print(f"Total: {report.total_queries} queries, {report.total_results} results")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if args.list_providers:
        list_providers()
        return 0

    domains = args.domains or []
    try:
        options = load_options(
            config_path=args.config,
            queries=args.queries,
            domain=domains[0] if domains else None,
            domains=domains[1:] or None,
            provider=args.provider,
            mode=args.mode,
            max_results=args.max_results,
            location=args.location,
            language=args.language,
            output_dir=args.output_dir,
            provider_key=args.provider_key,
            ll=args.ll,
            page_delay=args.page_delay,
            dataset=args.dataset,
            resume=args.resume,
        )
        provider = create_provider(options.provider, options.mode.value, api_key=options.provider_key)
    except (ConfigError, ValueError) as e:
        logger.error("%s", e)
        return 2

    writer = ResultWriter(options.output_dir, dataset=options.dataset)
    state_store = StateStore.in_dir(options.output_dir)
    if not options.resume:
        state_store.clear()
        state_store = NullStateStore()

    orchestrator = QueryOrchestrator(
        provider=provider,
        sink=writer,
        domains=options.target_domains,
        max_results=options.max_results,
        location=options.location,
        language=options.language,
        ll=options.ll,
        page_delay=options.page_delay,
        state_store=state_store,
    )
    report = orchestrator.run(options.queries)
    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
