from __future__ import annotations

import pytest

from trusttap_agent.enricher import (
    classify_source_type,
    enrich_evidence,
    enrich_item,
    parse_rating,
    parse_review_count,
    with_authority_signal,
)
from trusttap_agent.models import DomainAuthority, RawEvidenceItem


@pytest.mark.parametrize(
    "hostname,content,expected",
    [
        ("www.trustpilot.com", "", "reviews"),
        ("www.reddit.com", "", "forum"),
        ("community.forum.example", "", "forum"),
        ("www.reuters.com", "", "news"),
        ("www.bbc.co.uk", "", "news"),
        ("www.bbb.org", "", "regulator"),
        ("consumer.ftc.gov", "", "regulator"),
        ("www.sec.gov", "", "regulator"),
        ("www.pr.com", "", "press"),
        ("blog.example.com", "FOR IMMEDIATE RELEASE - press release from Acme", "press"),
        ("blog.example.com", "As reported by Reuters yesterday", "news"),
        ("blog.example.com", "nothing notable", "other"),
    ],
)
def test_source_type_rules(hostname, content, expected):
    assert classify_source_type(hostname, content) == expected


def test_hostname_rules_beat_content_rules():
    assert classify_source_type("www.trustpilot.com", "press release syndicated by Reuters") == "reviews"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Rated 4.5 out of 5 by customers", 4.5),
        ("Score 3.8/5", 3.8),
        ("Rating: 4.2 stars", 4.2),
        ("rating 4 / 5", 4.0),
        ("no numbers here", None),
        ("", None),
    ],
)
def test_parse_rating(text, expected):
    assert parse_rating(text) == expected


def test_parse_rating_rejects_out_of_range():
    assert parse_rating("rating: 9.5") is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Based on 1,234 reviews", 1234),
        ("12 reviews so far", 12),
        ("1 review", 1),
        ("4567 Reviews", 4567),
        ("reviewed by staff", None),
    ],
)
def test_parse_review_count(text, expected):
    assert parse_review_count(text) == expected


def test_enrich_item_builds_new_record():
    raw = RawEvidenceItem(
        title="Acme reviews",
        url="https://www.trustpilot.com/review/acme.com",
        content="Acme is rated 4.7 out of 5 based on 2,310 reviews",
    )
    enriched = enrich_item(raw)

    assert enriched.domain == "www.trustpilot.com"
    assert enriched.source_type == "reviews"
    assert enriched.rating == 4.7
    assert enriched.review_count == 2310
    assert enriched.synthetic is False
    assert enriched.url == raw.url
    assert not hasattr(raw, "source_type")


def test_enrich_unparseable_url_is_an_error():
    with pytest.raises(ValueError):
        enrich_evidence([RawEvidenceItem(url="no-host-here")])


def test_authority_signal_only_for_high_authority():
    enriched = enrich_evidence([RawEvidenceItem(url="https://www.reddit.com/r/x")])

    high = with_authority_signal(enriched, "bigbrand.com", DomainAuthority(rank=1, is_top_site=True, authority="high"))
    medium = with_authority_signal(enriched, "acme.com", DomainAuthority(authority="medium"))

    assert len(high) == 2
    assert high[-1].synthetic is True
    assert high[-1].url == "https://bigbrand.com"
    assert "bigbrand.com" in high[-1].title
    assert medium == enriched
    assert len(enriched) == 1
