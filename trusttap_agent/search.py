"""
Evidence collection over the Tavily search API.

Every planned query runs concurrently; one shared wall-clock timeout bounds
the whole batch. Failed queries count as empty and queries still running at
the deadline are abandoned, so the scan always proceeds with whatever
evidence arrived in time.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Protocol
from urllib.parse import urlparse

import httpx

from .models import RawEvidenceItem

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"

EVIDENCE_CAP = 12
CONTENT_MAX_CHARS = 1000
SEARCH_TIMEOUT_S = 5.0
RESULTS_PER_QUERY = 3
SEARCH_WORKERS = 17


class TrustTapError(Exception):
    pass


class SearchUnavailable(TrustTapError):
    """Raised when no search backend is configured."""


class SearchCapability(Protocol):
    def search(self, query: str, max_results: int) -> list[dict[str, Any]]: ...


class TavilySearch:
    def __init__(self, api_key: str | None, timeout_s: float = SEARCH_TIMEOUT_S):
        self._api_key = api_key
        self._timeout_s = timeout_s

    def search(self, query: str, max_results: int) -> list[dict[str, Any]]:
        if not self._api_key:
            raise SearchUnavailable("TAVILY_API_KEY is not set")

        with httpx.Client(timeout=self._timeout_s) as client:
            res = client.post(
                TAVILY_SEARCH_URL,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={"query": query, "max_results": max_results, "include_answer": False},
            )
            res.raise_for_status()
            data = res.json()

        results = data.get("results") if isinstance(data, dict) else None
        return results if isinstance(results, list) else []


def _has_web_hostname(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def _safe_search(search: SearchCapability, query: str, max_results: int) -> list[dict[str, Any]]:
    try:
        results = search.search(query, max_results)
    except Exception as e:
        logger.warning("Search failed for %r: %s", query, e)
        return []
    return results if isinstance(results, list) else []


def merge_results(
    batches: list[list[dict[str, Any]]],
    *,
    cap: int = EVIDENCE_CAP,
    content_max_chars: int = CONTENT_MAX_CHARS,
) -> list[RawEvidenceItem]:
    """Flatten per-query batches in order, keep the first item per URL, stop at ``cap``."""
    evidence: list[RawEvidenceItem] = []
    seen_urls: set[str] = set()

    for batch in batches:
        for result in batch:
            if len(evidence) >= cap:
                return evidence
            if not isinstance(result, dict):
                continue
            url = str(result.get("url") or "").strip()
            if not url or url in seen_urls or not _has_web_hostname(url):
                continue
            seen_urls.add(url)
            evidence.append(
                RawEvidenceItem(
                    title=str(result.get("title") or ""),
                    url=url,
                    content=str(result.get("content") or "")[:content_max_chars],
                )
            )
    return evidence


def collect_evidence(
    queries: list[str],
    search: SearchCapability,
    *,
    timeout_s: float = SEARCH_TIMEOUT_S,
    cap: int = EVIDENCE_CAP,
    results_per_query: int = RESULTS_PER_QUERY,
    content_max_chars: int = CONTENT_MAX_CHARS,
    max_workers: int = SEARCH_WORKERS,
) -> list[RawEvidenceItem]:
    if not queries:
        return []

    pool = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(queries))))
    try:
        futures = [pool.submit(_safe_search, search, q, results_per_query) for q in queries]
        done, not_done = wait(futures, timeout=timeout_s)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    if not_done:
        logger.warning(
            "Search timeout after %.1fs: using partial results (%d of %d queries abandoned)",
            timeout_s,
            len(not_done),
            len(queries),
        )

    batches = [f.result() if f in done else [] for f in futures]
    return merge_results(batches, cap=cap, content_max_chars=content_max_chars)
