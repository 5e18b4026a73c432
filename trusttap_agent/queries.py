from __future__ import annotations

from .domain import normalize_domain, root_brand

# Fraud queries exclude the domain's own site so company security pages
# cannot drown out third-party reports.
_FRAUD_TEMPLATES = (
    '"scammed by {domain}" -site:{domain}',
    '"is {domain} a scam" -site:{domain}',
    '"{domain} stole my money" site:reddit.com OR site:trustpilot.com',
    '"unauthorized charge {domain}" site:reddit.com',
    '"{domain} never delivered" -site:{domain}',
    '"{domain} counterfeit" complaints',
    '"{domain} chargeback" fraud',
)

_POSITIVE_TEMPLATES = (
    "{domain} awards",
    "{domain} case study",
    "{domain} partnership",
    "{domain} press release",
    '"{domain} trusted" OR "{domain} reliable"',
    '"{domain} security" OR "{domain} secure"',
    '"{domain} customer service" positive',
    '"{domain} reviews" 4 star OR 5 star',
)

_REVIEW_TEMPLATES = (
    "site:trustpilot.com {domain}",
    "site:reddit.com {brand}",
)


def plan_queries(raw_domain: str) -> list[str]:
    """Ordered search queries for a domain: fraud, positive, then review/forum."""
    domain = normalize_domain(raw_domain)
    brand = root_brand(domain)
    templates = _FRAUD_TEMPLATES + _POSITIVE_TEMPLATES + _REVIEW_TEMPLATES
    return [t.format(domain=domain, brand=brand) for t in templates]
