from __future__ import annotations

from collections.abc import Sequence

from .models import Arbitration, ClassifiedReport, DomainAuthority, RadarMetrics, RawEvidenceItem

_REVIEW_PLATFORMS = ("trustpilot", "reddit")


def _clamp(value: int) -> int:
    return max(0, min(100, int(value)))


def _mentions_reviews(evidence: Sequence[RawEvidenceItem]) -> bool:
    for e in evidence:
        url = e.url.lower()
        if any(p in url for p in _REVIEW_PLATFORMS) or "review" in e.content.lower():
            return True
    return False


def calculate_radar_metrics(
    arbitration: Arbitration,
    report: ClassifiedReport,
    authority: DomainAuthority,
    evidence: Sequence[RawEvidenceItem],
) -> RadarMetrics:
    """Coarse presentation scores; not used by the verdict policy."""
    fraud = arbitration.actual_fraud_count
    victims = arbitration.victim_count

    if fraud > 2:
        security = 10
    elif authority.is_top_site:
        security = 80
    else:
        security = 50

    if authority.authority == "high":
        reputation = 95
    elif len(report.positives) > 2:
        reputation = 80
    else:
        reputation = 30

    if _mentions_reviews(evidence):
        reviews = 80
    elif authority.is_top_site:
        reviews = 70
    else:
        reviews = 40

    transparency = 100 if report.citations else 50

    if fraud == 0 and victims > 0:
        trustworthiness = 85
    elif fraud > 0:
        trustworthiness = 40
    else:
        trustworthiness = 60

    return RadarMetrics(
        security=_clamp(security),
        reputation=_clamp(reputation),
        reviews=_clamp(reviews),
        transparency=_clamp(transparency),
        trustworthiness=_clamp(trustworthiness),
    )
