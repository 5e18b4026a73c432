from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Verdict = Literal["safe", "caution", "danger"]
Authority = Literal["high", "medium", "low"]
SourceType = Literal["reviews", "forum", "news", "regulator", "press", "other"]
Stance = Literal["negative", "neutral", "positive"]
ContextType = Literal["company_warning", "user_complaint", "regulatory_action", "news_report"]
FraudIntent = Literal["phishing", "non_delivery", "unauthorized_charge", "impersonation", "counterfeit", "chargeback_spike"]
Dissatisfaction = Literal["slow_shipping", "poor_support", "refund_delay", "high_price", "UX_issues"]

VERDICTS: tuple[str, ...] = ("safe", "caution", "danger")
SOURCE_TYPES: tuple[str, ...] = ("reviews", "forum", "news", "regulator", "press", "other")
STANCES: tuple[str, ...] = ("negative", "neutral", "positive")
CONTEXT_TYPES: tuple[str, ...] = ("company_warning", "user_complaint", "regulatory_action", "news_report")
FRAUD_INTENTS: tuple[str, ...] = (
    "phishing",
    "non_delivery",
    "unauthorized_charge",
    "impersonation",
    "counterfeit",
    "chargeback_spike",
)
DISSATISFACTIONS: tuple[str, ...] = ("slow_shipping", "poor_support", "refund_delay", "high_price", "UX_issues")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class RawEvidenceItem(_Frozen):
    title: str = ""
    url: str
    content: str = ""


class EnrichedEvidenceItem(RawEvidenceItem):
    domain: str
    source_type: SourceType = "other"
    rating: float | None = None
    review_count: int | None = None
    # Set only on the injected established-brand item.
    synthetic: bool = False


class EvidenceLabels(_Frozen):
    fraud_intent: tuple[FraudIntent, ...] = ()
    dissatisfaction: tuple[Dissatisfaction, ...] = ()


class ClassifiedEvidenceItem(EnrichedEvidenceItem):
    snippet: str = ""
    stance: Stance = "neutral"
    rationale: str = ""
    credibility: float = Field(0.5, ge=0.0, le=1.0)
    is_victim_of_impersonation: bool = False
    context_type: ContextType = "news_report"
    labels: EvidenceLabels = Field(default_factory=EvidenceLabels)


class Citation(_Frozen):
    title: str = ""
    url: str


class StanceCounts(_Frozen):
    negative: int = 0
    neutral: int = 0
    positive: int = 0


class Aggregates(_Frozen):
    stance_counts: StanceCounts = Field(default_factory=StanceCounts)


class ClassifiedReport(_Frozen):
    """Structured classifier output after enum validation."""

    risk_score: float | None = None
    verdict: Verdict = "caution"
    summary: str = "Insufficient evidence"
    positives: tuple[str, ...] = ()
    negatives: tuple[str, ...] = ()
    citations: tuple[Citation, ...] = ()
    evidence: tuple[ClassifiedEvidenceItem, ...] = ()
    aggregates: Aggregates | None = None


class DomainAuthority(_Frozen):
    rank: int | None = None
    is_top_site: bool = False
    authority: Authority = "low"


class DomainAuthoritySummary(_Frozen):
    rank: int | None = None
    authority: Authority = "low"


class RadarMetrics(_Frozen):
    security: int = Field(50, ge=0, le=100)
    reputation: int = Field(50, ge=0, le=100)
    reviews: int = Field(50, ge=0, le=100)
    transparency: int = Field(50, ge=0, le=100)
    trustworthiness: int = Field(50, ge=0, le=100)


class Arbitration(_Frozen):
    raw_risk: float
    risk_score: int = Field(..., ge=0, le=100)
    verdict: Verdict
    victim_count: int
    actual_fraud_count: int
    has_regulator_warning: bool
    evidence_count: int


class TrustReport(_Frozen):
    risk_score: int = Field(..., ge=0, le=100)
    verdict: Verdict
    summary: str
    positives: list[str] = Field(default_factory=list)
    negatives: list[str] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    radar_metrics: RadarMetrics = Field(default_factory=RadarMetrics)
    evidence: list[ClassifiedEvidenceItem] = Field(default_factory=list)
    aggregates: Aggregates = Field(default_factory=Aggregates)
    domain_authority: DomainAuthoritySummary | None = None


class ErrorResponse(BaseModel):
    error: str
