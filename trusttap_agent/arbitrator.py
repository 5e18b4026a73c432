"""
Deterministic verdict policy.

The classifier is treated as a signal extractor only: its per-item labels
feed the counts below, and its own proposed verdict is never used. Risk and
verdict are recomputed from the labels, the domain's authority tier, and the
thresholds in `PolicyConfig`.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import PolicyConfig
from .models import VERDICTS, Arbitration, ClassifiedEvidenceItem, ClassifiedReport, DomainAuthority, Verdict

logger = logging.getLogger(__name__)

DEFAULT_RAW_RISK = 50.0


def count_victim_evidence(evidence: Sequence[ClassifiedEvidenceItem]) -> int:
    return sum(1 for e in evidence if e.is_victim_of_impersonation)


def count_actual_fraud(evidence: Sequence[ClassifiedEvidenceItem]) -> int:
    return sum(1 for e in evidence if e.labels.fraud_intent and not e.is_victim_of_impersonation)


def has_regulator_warning(evidence: Sequence[ClassifiedEvidenceItem]) -> bool:
    return any(e.source_type == "regulator" and e.stance == "negative" for e in evidence)


def discount_for_authority(
    risk: float,
    authority: DomainAuthority,
    victim_count: int,
    actual_fraud_count: int,
    policy: PolicyConfig,
) -> float:
    if authority.authority == "high" and victim_count >= actual_fraud_count:
        discounted = max(policy.high_authority_floor, risk * policy.high_authority_factor)
        logger.info("High authority site (rank %s): risk %.1f -> %.1f", authority.rank, risk, discounted)
        return discounted
    if authority.authority == "medium" and victim_count > 0:
        return risk * policy.medium_authority_factor
    return risk


def decide_verdict(
    risk: float,
    actual_fraud_count: int,
    regulator_warning: bool,
    evidence_count: int,
    policy: PolicyConfig,
) -> tuple[float, Verdict]:
    """First matching rule wins: danger, then safe, else caution.

    A negative regulator item stands in for the second fraud source only;
    without any actual fraud evidence the verdict is never danger.
    """
    fraud_corroborated = actual_fraud_count >= policy.danger_min_fraud_sources or (
        regulator_warning and actual_fraud_count > 0
    )
    if risk >= policy.danger_min_risk and fraud_corroborated:
        return risk, "danger"
    if risk <= policy.safe_max_risk and actual_fraud_count == 0 and evidence_count >= policy.safe_min_evidence:
        return risk, "safe"
    if actual_fraud_count == 0:
        # Dissatisfaction alone never scores like fraud.
        risk = min(risk, policy.dissatisfaction_risk_cap)
    return risk, "caution"


def arbitrate(
    report: ClassifiedReport,
    authority: DomainAuthority,
    policy: PolicyConfig | None = None,
) -> Arbitration:
    policy = policy or PolicyConfig()
    evidence = report.evidence

    victim_count = count_victim_evidence(evidence)
    actual_fraud_count = count_actual_fraud(evidence)
    regulator_warning = has_regulator_warning(evidence)

    raw_risk = DEFAULT_RAW_RISK if report.risk_score is None else float(report.risk_score)
    risk = discount_for_authority(raw_risk, authority, victim_count, actual_fraud_count, policy)
    # Thresholds apply to the reported integer score; truncation keeps it
    # at or below the discounted value.
    risk = int(max(0.0, min(100.0, risk)))
    risk, verdict = decide_verdict(risk, actual_fraud_count, regulator_warning, len(evidence), policy)
    risk_score = int(risk)
    if verdict not in VERDICTS:
        verdict = "caution"

    return Arbitration(
        raw_risk=raw_risk,
        risk_score=risk_score,
        verdict=verdict,
        victim_count=victim_count,
        actual_fraud_count=actual_fraud_count,
        has_regulator_warning=regulator_warning,
        evidence_count=len(evidence),
    )
