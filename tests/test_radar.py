from __future__ import annotations

from trusttap_agent.models import Arbitration, Citation, ClassifiedReport, DomainAuthority, RawEvidenceItem
from trusttap_agent.radar import calculate_radar_metrics

HIGH = DomainAuthority(rank=1, is_top_site=True, authority="high")
LOW = DomainAuthority(authority="low")


def _decision(fraud=0, victims=0):
    return Arbitration(
        raw_risk=50,
        risk_score=50,
        verdict="caution",
        victim_count=victims,
        actual_fraud_count=fraud,
        has_regulator_warning=False,
        evidence_count=fraud + victims,
    )


def test_top_site_with_victim_context():
    report = ClassifiedReport(citations=(Citation(title="a", url="https://a.com"),))
    radar = calculate_radar_metrics(_decision(victims=3), report, HIGH, [])

    assert radar.security == 80
    assert radar.reputation == 95
    assert radar.reviews == 70
    assert radar.transparency == 100
    assert radar.trustworthiness == 85


def test_heavy_fraud_on_unknown_site():
    evidence = [RawEvidenceItem(url="https://www.trustpilot.com/review/x.com", content="")]
    radar = calculate_radar_metrics(_decision(fraud=3), ClassifiedReport(), LOW, evidence)

    assert radar.security == 10
    assert radar.reputation == 30
    assert radar.reviews == 80
    assert radar.transparency == 50
    assert radar.trustworthiness == 40


def test_neutral_defaults():
    report = ClassifiedReport(positives=("a", "b", "c"))
    evidence = [RawEvidenceItem(url="https://blog.example.com/post", content="Our honest Review of x.com")]
    radar = calculate_radar_metrics(_decision(), report, LOW, evidence)

    assert radar.security == 50
    assert radar.reputation == 80
    assert radar.reviews == 80
    assert radar.trustworthiness == 60


def test_radar_is_pure_and_bounded():
    args = (_decision(fraud=1, victims=1), ClassifiedReport(), LOW, [])
    first = calculate_radar_metrics(*args)
    assert first == calculate_radar_metrics(*args)
    assert all(0 <= v <= 100 for v in first.model_dump().values())
