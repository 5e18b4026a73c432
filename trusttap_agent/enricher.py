from __future__ import annotations

import re
from urllib.parse import urlparse

from .models import DomainAuthority, EnrichedEvidenceItem, RawEvidenceItem, SourceType

# First match wins; hostname patterns are tried before content patterns.
_SOURCE_RULES: tuple[tuple[SourceType, re.Pattern[str] | None, re.Pattern[str] | None], ...] = (
    ("reviews", re.compile(r"trustpilot|g2\.com|capterra|yelp|tripadvisor|sitejabber"), None),
    ("forum", re.compile(r"reddit|quora|forum|stackexchange"), None),
    (
        "news",
        re.compile(r"news|journalism|press|cnn|bbc|reuters|apnews|nytimes|theguardian"),
        re.compile(r"\b(reuters|associated press|bbc news|cnn)\b", re.IGNORECASE),
    ),
    ("regulator", re.compile(r"(^|\.)(bbb\.org|ftc\.gov|sec\.gov)$"), None),
    (
        "press",
        re.compile(r"press-release|(^|\.)pr\.com$|newswire"),
        re.compile(r"press[- ]release|newswire", re.IGNORECASE),
    ),
)

_RATING_RE = re.compile(r"\b(\d(?:\.\d+)?)\s*(?:out of|/)\s*5\b|rating[:\s]+(\d(?:\.\d+)?)", re.IGNORECASE)
_REVIEW_COUNT_RE = re.compile(r"\b(\d{1,3}(?:,\d{3})+|\d+)\s*reviews?\b", re.IGNORECASE)


def evidence_hostname(url: str) -> str:
    hostname = urlparse(url).hostname
    if not hostname:
        raise ValueError(f"Evidence URL has no hostname: {url!r}")
    return hostname


def classify_source_type(hostname: str, content: str) -> SourceType:
    host = hostname.lower()
    for source_type, host_re, _ in _SOURCE_RULES:
        if host_re is not None and host_re.search(host):
            return source_type
    for source_type, _, content_re in _SOURCE_RULES:
        if content_re is not None and content_re.search(content or ""):
            return source_type
    return "other"


def parse_rating(text: str) -> float | None:
    m = _RATING_RE.search(text or "")
    if not m:
        return None
    try:
        value = float(m.group(1) or m.group(2))
    except (TypeError, ValueError):
        return None
    return value if 0.0 <= value <= 5.0 else None


def parse_review_count(text: str) -> int | None:
    m = _REVIEW_COUNT_RE.search(text or "")
    if not m:
        return None
    try:
        return int(m.group(1).replace(",", ""))
    except ValueError:
        return None


def enrich_item(item: RawEvidenceItem) -> EnrichedEvidenceItem:
    hostname = evidence_hostname(item.url)
    return EnrichedEvidenceItem(
        title=item.title,
        url=item.url,
        content=item.content,
        domain=hostname,
        source_type=classify_source_type(hostname, item.content),
        rating=parse_rating(item.content),
        review_count=parse_review_count(item.content),
    )


def enrich_evidence(evidence: list[RawEvidenceItem]) -> list[EnrichedEvidenceItem]:
    return [enrich_item(item) for item in evidence]


def authority_signal(domain: str) -> EnrichedEvidenceItem:
    return EnrichedEvidenceItem(
        title=f"{domain} - Established, widely recognized brand",
        url=f"https://{domain}",
        content=(
            f"{domain} is a well-established organisation with strong brand recognition and market presence. "
            "Reports of scams that mention it may describe criminals impersonating the brand rather than "
            "fraud committed by it."
        ),
        domain=domain,
        source_type="other",
        synthetic=True,
    )


def with_authority_signal(
    evidence: list[EnrichedEvidenceItem],
    domain: str,
    authority: DomainAuthority,
) -> list[EnrichedEvidenceItem]:
    """Append the established-brand counter-signal for high-authority domains."""
    if authority.authority != "high":
        return list(evidence)
    return [*evidence, authority_signal(domain)]
