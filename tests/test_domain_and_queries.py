from __future__ import annotations

import pytest

from trusttap_agent.domain import normalize_domain, root_brand
from trusttap_agent.queries import plan_queries


def test_normalize_strips_www_and_lowercases():
    assert normalize_domain("  WWW.Example.COM ") == "example.com"
    assert normalize_domain("shop.example.com") == "shop.example.com"


def test_normalize_rejects_empty():
    with pytest.raises(ValueError):
        normalize_domain("   ")


def test_root_brand_is_second_to_last_label():
    assert root_brand("www.shop.acme.co") == "acme"
    assert root_brand("acme.com") == "acme"
    assert root_brand("localhost") == "localhost"


def test_plan_queries_covers_all_query_kinds():
    queries = plan_queries("www.Acme.com")

    assert len(queries) >= 15
    assert queries[0] == '"scammed by acme.com" -site:acme.com'
    assert "site:trustpilot.com acme.com" in queries
    assert queries[-1] == "site:reddit.com acme"
    assert any("awards" in q for q in queries)
    assert any("case study" in q for q in queries)
    assert any("partnership" in q for q in queries)
    assert any("press release" in q for q in queries)


def test_fraud_queries_exclude_own_site_positive_queries_do_not():
    queries = plan_queries("acme.com")
    scam_queries = [q for q in queries if "scam" in q or "never delivered" in q]
    assert scam_queries
    assert all("-site:acme.com" in q for q in scam_queries)
    assert "acme.com awards" in queries
    assert all("-site:" not in q for q in queries if "awards" in q or "partnership" in q)


def test_plan_queries_is_deterministic():
    assert plan_queries("acme.com") == plan_queries("ACME.com")
