"""
Runtime configuration for the TrustTap agent.

Values come from environment variables; a `.env` file at the project root is
loaded first and never overrides variables that are already set. Arbitration
thresholds live in `PolicyConfig` so they can be tuned without code changes.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

from dotenv import load_dotenv

from .search import CONTENT_MAX_CHARS, EVIDENCE_CAP, RESULTS_PER_QUERY, SEARCH_TIMEOUT_S, SEARCH_WORKERS

logger = logging.getLogger(__name__)

_HERE = Path(__file__).resolve()
_PROJECT_ROOT = _HERE.parents[1]

load_dotenv(_PROJECT_ROOT / ".env", override=False)

_POLICY_ENV_PREFIX = "TRUSTTAP_POLICY_"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class PolicyConfig:
    """Arbitration constants. Risk values are on the 0-100 scale."""

    high_authority_factor: float = 0.25
    high_authority_floor: float = 15.0
    medium_authority_factor: float = 0.6
    danger_min_risk: float = 60.0
    danger_min_fraud_sources: int = 2
    safe_max_risk: float = 30.0
    safe_min_evidence: int = 2
    dissatisfaction_risk_cap: float = 50.0

    @classmethod
    def from_env(cls) -> PolicyConfig:
        values: dict[str, float | int] = {}
        defaults = cls()
        for f in fields(cls):
            name = _POLICY_ENV_PREFIX + f.name.upper()
            default = getattr(defaults, f.name)
            if isinstance(default, int):
                values[f.name] = _env_int(name, default)
            else:
                values[f.name] = _env_float(name, default)
        return cls(**values)


@dataclass(frozen=True)
class Settings:
    tavily_api_key: str | None = None
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    search_timeout_s: float = SEARCH_TIMEOUT_S
    evidence_cap: int = EVIDENCE_CAP
    results_per_query: int = RESULTS_PER_QUERY
    content_max_chars: int = CONTENT_MAX_CHARS
    search_workers: int = SEARCH_WORKERS
    classifier_timeout_s: float = 30.0
    top_domains_file: str | None = None
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        raw_origins = os.getenv("TRUSTTAP_CORS_ORIGINS", "").strip()
        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip()) or ("*",)
        return cls(
            tavily_api_key=os.getenv("TAVILY_API_KEY") or None,
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            search_timeout_s=max(0.1, _env_float("TRUSTTAP_SEARCH_TIMEOUT_S", cls.search_timeout_s)),
            evidence_cap=max(0, _env_int("TRUSTTAP_EVIDENCE_CAP", cls.evidence_cap)),
            results_per_query=max(1, _env_int("TRUSTTAP_RESULTS_PER_QUERY", cls.results_per_query)),
            content_max_chars=max(0, _env_int("TRUSTTAP_CONTENT_MAX_CHARS", cls.content_max_chars)),
            search_workers=max(1, _env_int("TRUSTTAP_SEARCH_WORKERS", cls.search_workers)),
            classifier_timeout_s=max(1.0, _env_float("TRUSTTAP_CLASSIFIER_TIMEOUT_S", cls.classifier_timeout_s)),
            top_domains_file=os.getenv("TRUSTTAP_TOP_DOMAINS_FILE") or None,
            cors_origins=origins,
            log_level=(os.getenv("LOG_LEVEL") or cls.log_level).upper(),
        )
