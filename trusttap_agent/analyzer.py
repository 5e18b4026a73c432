from __future__ import annotations

import logging
import time
from collections.abc import Collection
from dataclasses import dataclass, field

from .ai_judge import Classifier, GeminiClassifier, judge_domain, report_or_fallback
from .arbitrator import arbitrate
from .authority import classify_authority
from .authority_data import TOP_DOMAINS, load_top_domains
from .config import PolicyConfig, Settings
from .domain import normalize_domain
from .enricher import enrich_evidence, with_authority_signal
from .models import (
    Aggregates,
    ClassifiedReport,
    DomainAuthoritySummary,
    RadarMetrics,
    StanceCounts,
    TrustReport,
)
from .queries import plan_queries
from .radar import calculate_radar_metrics
from .search import SearchCapability, TavilySearch, collect_evidence

logger = logging.getLogger(__name__)

FAILURE_SUMMARY = "Analysis failed due to technical error"


@dataclass(frozen=True)
class Scanner:
    """Collaborators and settings for one scan. Holds no per-request state."""

    search: SearchCapability
    classifier: Classifier
    settings: Settings = field(default_factory=Settings)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    top_domains: Collection[str] = TOP_DOMAINS


def build_scanner(settings: Settings | None = None, policy: PolicyConfig | None = None) -> Scanner:
    settings = settings or Settings.from_env()
    top_domains: Collection[str] = TOP_DOMAINS
    if settings.top_domains_file:
        top_domains = load_top_domains(settings.top_domains_file)
    return Scanner(
        search=TavilySearch(settings.tavily_api_key, timeout_s=settings.search_timeout_s),
        classifier=GeminiClassifier(
            settings.gemini_api_key,
            settings.gemini_model,
            timeout_s=settings.classifier_timeout_s,
        ),
        settings=settings,
        policy=policy or PolicyConfig.from_env(),
        top_domains=top_domains,
    )


def fallback_report() -> TrustReport:
    return TrustReport(
        risk_score=50,
        verdict="caution",
        summary=FAILURE_SUMMARY,
        radar_metrics=RadarMetrics(),
    )


def _aggregates(report: ClassifiedReport) -> Aggregates:
    if report.aggregates is not None:
        return report.aggregates
    counts = {"negative": 0, "neutral": 0, "positive": 0}
    for e in report.evidence:
        counts[e.stance] += 1
    return Aggregates(stance_counts=StanceCounts(**counts))


def run_scan(raw_domain: str, scanner: Scanner) -> TrustReport:
    """Full pipeline. Collaborator failures degrade inside; anything else raises."""
    t0 = time.perf_counter()
    settings = scanner.settings

    domain = normalize_domain(raw_domain)
    queries = plan_queries(domain)

    raw_evidence = collect_evidence(
        queries,
        scanner.search,
        timeout_s=settings.search_timeout_s,
        cap=settings.evidence_cap,
        results_per_query=settings.results_per_query,
        content_max_chars=settings.content_max_chars,
        max_workers=settings.search_workers,
    )
    enriched = enrich_evidence(raw_evidence)

    authority = classify_authority(domain, scanner.top_domains)
    submitted = with_authority_signal(enriched, domain, authority)

    report = report_or_fallback(judge_domain(domain, submitted, scanner.classifier))
    decision = arbitrate(report, authority, scanner.policy)
    radar = calculate_radar_metrics(decision, report, authority, raw_evidence)

    logger.info(
        "Scanned %s: risk=%d verdict=%s (raw=%.1f fraud=%d victim=%d evidence=%d authority=%s) in %dms",
        domain,
        decision.risk_score,
        decision.verdict,
        decision.raw_risk,
        decision.actual_fraud_count,
        decision.victim_count,
        decision.evidence_count,
        authority.authority,
        int((time.perf_counter() - t0) * 1000),
    )

    return TrustReport(
        risk_score=decision.risk_score,
        verdict=decision.verdict,
        summary=report.summary,
        positives=list(report.positives),
        negatives=list(report.negatives),
        citations=list(report.citations),
        sources=queries,
        radar_metrics=radar,
        evidence=list(report.evidence),
        aggregates=_aggregates(report),
        domain_authority=DomainAuthoritySummary(rank=authority.rank, authority=authority.authority),
    )


def scan_domain(raw_domain: str, scanner: Scanner) -> TrustReport:
    """Like `run_scan`, but any failure yields the fixed fallback report."""
    try:
        return run_scan(raw_domain, scanner)
    except Exception:
        logger.exception("Scan failed for %r", raw_domain)
        return fallback_report()
