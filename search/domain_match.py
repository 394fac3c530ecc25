"""
Domain matching: find where a target domain first appears in ranked results.

Match tiers, checked in order for each item:
  exact      hostname == target
  subdomain  hostname ends with "." + target
  partial    every dot-segment of target is contained in some hostname segment

The scan returns the first item (in rank order) satisfying any tier; a later
item is never preferred for being a tighter match.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import urlparse

from models.enums import MatchTier
from models.schema import MatchResult, ResultItem


def _strip_www(host: str) -> str:
    host = host.lower()
    while host.startswith("www."):
        host = host[4:]
    return host


def extract_hostname(url: str) -> str:
    """Hostname of a URL, lowercased with leading www. removed ('' if none)."""
    if not url:
        return ""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return _strip_www(host)


def normalize_domain(domain: Optional[str]) -> str:
    """
    Normalize a user-supplied domain or URL to a bare hostname.

    normalize_domain("WWW.Example.com") == normalize_domain("https://example.com/x")
    == "example.com". Idempotent.
    """
    if not domain:
        return ""
    domain = domain.strip()
    candidate = domain if "://" in domain else f"https://{domain}"
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        host = None
    if not host:
        return _strip_www(domain)
    return _strip_www(host)


def classify_match(host: str, target: str) -> Optional[MatchTier]:
    """Return the first tier ``host`` satisfies for ``target``, or None."""
    if not host or not target:
        return None
    if host == target:
        return MatchTier.EXACT
    if host.endswith("." + target):
        return MatchTier.SUBDOMAIN

    host_parts = host.split(".")
    if all(
        any(target_part in host_part for host_part in host_parts)
        for target_part in target.split(".")
    ):
        return MatchTier.PARTIAL
    return None


def find_first_domain_match(
    items: Iterable[ResultItem],
    domain: str,
) -> Optional[MatchResult]:
    """Scan items in order and return the first one matching ``domain``."""
    target = normalize_domain(domain)
    if not target:
        return None

    for item in items:
        if item.error:
            continue
        link = item.link or ""
        tier = classify_match(extract_hostname(link), target)
        if tier is not None:
            return MatchResult(
                link=link,
                title=item.title or "",
                position=item.position or 0,
                tier=tier,
            )
    return None
