"""
Pytest fixtures for TrustTap tests. Search and classifier collaborators are
in-memory fakes so no test touches the network.
"""

from __future__ import annotations

import json
import threading
from typing import Any

import pytest

from trusttap_agent.analyzer import Scanner
from trusttap_agent.config import PolicyConfig, Settings


class FakeSearch:
    """Returns canned results per query; queries listed in `fail` raise."""

    def __init__(self, results: dict[str, list[dict[str, Any]]] | None = None, default=None, fail=()):
        self.results = results or {}
        self.default = default or []
        self.fail = set(fail)
        self.calls: list[tuple[str, int]] = []
        self._lock = threading.Lock()

    def search(self, query: str, max_results: int) -> list[dict[str, Any]]:
        with self._lock:
            self.calls.append((query, max_results))
        if query in self.fail or "*" in self.fail:
            raise RuntimeError("search backend down")
        return self.results.get(query, self.default)


class FakeClassifier:
    """Returns a fixed response text and records what it was given."""

    def __init__(self, response: str | dict | None):
        self.response = json.dumps(response) if isinstance(response, dict) else response
        self.prompts: list[str] = []

    def complete(self, system: str, prompt: str) -> str | None:
        self.prompts.append(prompt)
        return self.response

    def submitted(self) -> dict[str, Any]:
        """Decode the domain/evidence payload of the last prompt."""
        payload, _, _ = self.prompts[-1].partition("\n\n")
        return json.loads(payload)


def result(url: str, title: str = "Result", content: str = "") -> dict[str, Any]:
    return {"title": title, "url": url, "content": content}


def classified_item(
    url: str,
    *,
    fraud_intent=(),
    dissatisfaction=(),
    victim: bool = False,
    stance: str = "negative",
    source_type: str = "forum",
    context_type: str = "user_complaint",
) -> dict[str, Any]:
    return {
        "title": f"About {url}",
        "url": url,
        "snippet": "",
        "domain": "example.org",
        "source_type": source_type,
        "stance": stance,
        "rationale": "test",
        "credibility": 0.8,
        "rating": None,
        "review_count": None,
        "is_victim_of_impersonation": victim,
        "context_type": context_type,
        "labels": {"fraud_intent": list(fraud_intent), "dissatisfaction": list(dissatisfaction)},
    }


def classifier_report(evidence: list[dict[str, Any]], risk_score=50, verdict="caution", **extra) -> dict[str, Any]:
    report = {
        "risk_score": risk_score,
        "verdict": verdict,
        "summary": "Classifier summary",
        "positives": [],
        "negatives": [],
        "citations": [],
        "evidence": evidence,
    }
    report.update(extra)
    return report


@pytest.fixture
def settings() -> Settings:
    return Settings(search_timeout_s=2.0)


@pytest.fixture
def make_scanner(settings):
    def _make(search, classifier, top_domains=frozenset({"bigbrand.com"}), policy=None) -> Scanner:
        return Scanner(
            search=search,
            classifier=classifier,
            settings=settings,
            policy=policy or PolicyConfig(),
            top_domains=top_domains,
        )

    return _make
