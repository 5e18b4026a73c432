"""
Evidence classifier backed by Google Gemini.

The model labels each evidence item (stance, victim vs perpetrator context,
fraud-intent and dissatisfaction labels) and proposes an aggregate report.
Its output is parsed into a validated `ClassifiedReport`; anything that
cannot be parsed becomes a `JudgeFailure`, which callers turn into the
conservative fallback report.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Protocol, Union

from google import genai
from google.genai import types

from .models import (
    CONTEXT_TYPES,
    DISSATISFACTIONS,
    FRAUD_INTENTS,
    SOURCE_TYPES,
    STANCES,
    VERDICTS,
    Aggregates,
    Citation,
    ClassifiedEvidenceItem,
    ClassifiedReport,
    EnrichedEvidenceItem,
    EvidenceLabels,
    StanceCounts,
)

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Insufficient evidence"

_VERDICT_MAP = {
    "ok": "safe",
    "safe": "safe",
    "legit": "safe",
    "legitimate": "safe",
    "caution": "caution",
    "warning": "caution",
    "warn": "caution",
    "suspicious": "caution",
    "danger": "danger",
    "dangerous": "danger",
    "scam": "danger",
    "fraud": "danger",
}

_TRUE_STRINGS = {"true", "yes", "1"}

SYSTEM_INSTRUCTION = """You are a strict website risk analyst. Return STRICT JSON only. Use ONLY the provided evidence. Do not use outside knowledge and do not invent sources.

CRITICAL: Distinguish between victim and perpetrator context:
- "Company warns about scams targeting its users" -> NOT fraud by the company (is_victim_of_impersonation: true)
- "Users report being scammed BY the company" -> fraud by the company (is_victim_of_impersonation: false)

For each evidence item, classify:
- is_victim_of_impersonation: boolean (true if the company is warning about scams, not committing them)
- context_type: "company_warning" | "user_complaint" | "regulatory_action" | "news_report"

Examples:
- "Amazon Fraud Alert - amazon.jobs" -> is_victim_of_impersonation: true, context_type: "company_warning"
- "I was scammed by this seller on the site" -> is_victim_of_impersonation: false, context_type: "user_complaint"

Rules:
- Classify dissatisfaction separately from fraud intent.
- Do NOT mark a site as "danger" without >=2 independent fraud-intent sources (actual fraud, not victim warnings) or a regulator warning.
- If evidence is mostly victim warnings and there is no actual fraud, cap the verdict at "caution".
- Treat positive signals (ratings >=4.3 with a large review_count, reputable press, partnerships, awards, certifications) as risk reducers.
- Every citation must reference a URL that appears in the supplied evidence."""

OUTPUT_SCHEMA = """Return JSON with exactly this structure:
{
  "risk_score": 0-100,
  "verdict": "safe" | "caution" | "danger",
  "summary": string,
  "positives": string[],
  "negatives": string[],
  "citations": [{"title": string, "url": string}],
  "evidence": [
    {
      "title": string, "url": string, "snippet": string, "domain": string,
      "source_type": "reviews" | "forum" | "news" | "regulator" | "press" | "other",
      "stance": "negative" | "neutral" | "positive",
      "rationale": string,
      "credibility": number (0..1),
      "rating": number | null (0..5 if parseable),
      "review_count": number | null,
      "is_victim_of_impersonation": boolean,
      "context_type": "company_warning" | "user_complaint" | "regulatory_action" | "news_report",
      "labels": {
        "fraud_intent": string[] (only from: phishing, non_delivery, unauthorized_charge, impersonation, counterfeit, chargeback_spike),
        "dissatisfaction": string[] (only from: slow_shipping, poor_support, refund_delay, high_price, UX_issues)
      }
    }
  ],
  "aggregates": {"stance_counts": {"negative": number, "neutral": number, "positive": number}}
}
Include one "evidence" entry for every supplied evidence item."""


class Classifier(Protocol):
    def complete(self, system: str, prompt: str) -> str | None: ...


@dataclass(frozen=True)
class Judged:
    report: ClassifiedReport


@dataclass(frozen=True)
class JudgeFailure:
    reason: str


JudgeOutcome = Union[Judged, JudgeFailure]


class GeminiClassifier:
    """Gemini backend via the google-genai SDK. No search tool is attached."""

    def __init__(self, api_key: str | None, model: str, timeout_s: float = 30.0):
        self._api_key = api_key
        self._model = model
        self._timeout_s = timeout_s

    def complete(self, system: str, prompt: str) -> str | None:
        if not self._api_key:
            logger.warning("GEMINI_API_KEY is not set; classifier unavailable")
            return None

        try:
            client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=int(self._timeout_s * 1000)),
            )
            config = types.GenerateContentConfig(
                system_instruction=system,
                response_mime_type="application/json",
                temperature=0.2,
                max_output_tokens=8192,
            )
            resp = client.models.generate_content(
                model=self._model,
                contents=[types.Content(role="user", parts=[types.Part.from_text(text=prompt)])],
                config=config,
            )
        except Exception as e:
            logger.warning("Gemini call failed: %s", e)
            return None

        return (getattr(resp, "text", None) or "").strip() or None


def build_prompt(domain: str, evidence: list[EnrichedEvidenceItem]) -> str:
    payload = {"domain": domain, "evidence": [e.model_dump() for e in evidence]}
    return json.dumps(payload, ensure_ascii=False) + "\n\n" + OUTPUT_SCHEMA


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    s = str(value).strip()
    return s or default


def _as_str_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        value = [value]
    out: list[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        s = str(item).strip()
        if s:
            out.append(s)
    return tuple(out)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _pick(value: Any, allowed: tuple[str, ...], default: str) -> str:
    s = _as_str(value).lower()
    for candidate in allowed:
        if candidate.lower() == s:
            return candidate
    return default


def _vocabulary(value: Any, allowed: tuple[str, ...]) -> tuple[str, ...]:
    lookup = {a.lower(): a for a in allowed}
    out: list[str] = []
    for item in _as_str_list(value):
        label = lookup.get(item.lower())
        if label and label not in out:
            out.append(label)
    return tuple(out)


def _normalize_evidence_item(raw: Any, submitted: dict[str, EnrichedEvidenceItem]) -> ClassifiedEvidenceItem | None:
    if not isinstance(raw, dict):
        return None
    url = _as_str(raw.get("url"))
    if not url:
        return None

    base = submitted.get(url)
    labels = raw.get("labels") if isinstance(raw.get("labels"), dict) else {}

    credibility = _as_number(raw.get("credibility"))
    credibility = 0.5 if credibility is None else max(0.0, min(1.0, credibility))

    rating = _as_number(raw.get("rating"))
    if rating is None or not 0.0 <= rating <= 5.0:
        rating = base.rating if base else None

    review_count = _as_number(raw.get("review_count"))
    if review_count is None or review_count < 0 or review_count != int(review_count):
        review_count_int = base.review_count if base else None
    else:
        review_count_int = int(review_count)

    default_source = base.source_type if base else "other"

    return ClassifiedEvidenceItem(
        title=_as_str(raw.get("title"), base.title if base else ""),
        url=url,
        content=base.content if base else "",
        snippet=_as_str(raw.get("snippet")),
        domain=_as_str(raw.get("domain"), base.domain if base else ""),
        source_type=_pick(raw.get("source_type"), SOURCE_TYPES, default_source),
        rating=rating,
        review_count=review_count_int,
        synthetic=base.synthetic if base else False,
        stance=_pick(raw.get("stance"), STANCES, "neutral"),
        rationale=_as_str(raw.get("rationale")),
        credibility=credibility,
        is_victim_of_impersonation=_as_bool(raw.get("is_victim_of_impersonation")),
        context_type=_pick(raw.get("context_type"), CONTEXT_TYPES, "news_report"),
        labels=EvidenceLabels(
            fraud_intent=_vocabulary(labels.get("fraud_intent"), FRAUD_INTENTS),
            dissatisfaction=_vocabulary(labels.get("dissatisfaction"), DISSATISFACTIONS),
        ),
    )


def _normalize_aggregates(raw: Any) -> Aggregates | None:
    if not isinstance(raw, dict) or not isinstance(raw.get("stance_counts"), dict):
        return None
    counts = raw["stance_counts"]
    values: dict[str, int] = {}
    for stance in STANCES:
        n = _as_number(counts.get(stance))
        if n is None or n < 0:
            return None
        values[stance] = int(n)
    return Aggregates(stance_counts=StanceCounts(**values))


def _normalize_citations(raw: Any) -> tuple[Citation, ...]:
    if not isinstance(raw, list):
        return ()
    out: list[Citation] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        url = _as_str(item.get("url"))
        if url:
            out.append(Citation(title=_as_str(item.get("title")), url=url))
    return tuple(out)


def parse_report(text: str | None, submitted: list[EnrichedEvidenceItem] | None = None) -> JudgeOutcome:
    """Validate raw classifier text against the report schema and closed enums.

    When `submitted` is given, classified items are kept only for submitted
    URLs, first occurrence per URL.
    """
    if not text or not text.strip():
        return JudgeFailure("empty classifier response")
    try:
        raw = json.loads(_strip_fences(text))
    except ValueError as e:
        return JudgeFailure(f"classifier response is not JSON: {e}")
    if not isinstance(raw, dict):
        return JudgeFailure("classifier response is not a JSON object")

    raw_evidence = raw.get("evidence", [])
    if raw_evidence is None:
        raw_evidence = []
    if not isinstance(raw_evidence, list):
        return JudgeFailure("classifier evidence is not a list")

    by_url = {e.url: e for e in (submitted or [])}
    evidence_list: list[ClassifiedEvidenceItem] = []
    seen_urls: set[str] = set()
    for entry in raw_evidence:
        item = _normalize_evidence_item(entry, by_url)
        if item is None or item.url in seen_urls:
            continue
        # Items must describe evidence that was actually submitted.
        if submitted is not None and item.url not in by_url:
            continue
        seen_urls.add(item.url)
        evidence_list.append(item)
    evidence = tuple(evidence_list)

    risk = _as_number(raw.get("risk_score"))
    if risk is not None:
        risk = max(0.0, min(100.0, risk))

    verdict = _VERDICT_MAP.get(_as_str(raw.get("verdict")).lower(), "caution")
    if verdict not in VERDICTS:
        verdict = "caution"

    return Judged(
        ClassifiedReport(
            risk_score=risk,
            verdict=verdict,
            summary=_as_str(raw.get("summary"), "Analysis incomplete"),
            positives=_as_str_list(raw.get("positives")),
            negatives=_as_str_list(raw.get("negatives")),
            citations=_normalize_citations(raw.get("citations")),
            evidence=evidence,
            aggregates=_normalize_aggregates(raw.get("aggregates")),
        )
    )


def fallback_classification() -> ClassifiedReport:
    return ClassifiedReport(risk_score=50, verdict="caution", summary=FALLBACK_SUMMARY)


def report_or_fallback(outcome: JudgeOutcome) -> ClassifiedReport:
    if isinstance(outcome, Judged):
        return outcome.report
    logger.warning("Classifier output rejected (%s); using conservative fallback", outcome.reason)
    return fallback_classification()


def judge_domain(domain: str, evidence: list[EnrichedEvidenceItem], classifier: Classifier) -> JudgeOutcome:
    """Submit evidence to the classifier and validate what comes back."""
    try:
        text = classifier.complete(SYSTEM_INSTRUCTION, build_prompt(domain, evidence))
    except Exception as e:
        logger.warning("Classifier call failed: %s", e)
        return JudgeFailure(f"classifier call failed: {e}")
    if not evidence:
        # No evidence, so the proposed score is ungrounded.
        return JudgeFailure("no evidence collected")
    return parse_report(text, evidence)
