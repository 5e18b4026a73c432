from __future__ import annotations

import logging
import re
from collections.abc import Collection

from .authority_data import TOP_DOMAINS
from .domain import normalize_domain
from .models import DomainAuthority

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")

# Coarse "looks like an established organisation" shapes.
_ENTERPRISE_PATTERNS = (
    re.compile(r"\.(com|org|net|edu|gov)$"),
    re.compile(r"^[a-z]{2,}\.(com|org|net)$"),
    re.compile(r"^[a-z]{3,}\.[a-z]{2,}$"),
)

_EXACT_RANK = 1
_PARENT_RANK = 100

LOW_AUTHORITY = DomainAuthority(rank=None, is_top_site=False, authority="low")


def _checked_labels(domain: str) -> list[str]:
    labels = domain.split(".")
    if len(labels) < 2 or any(not _LABEL_RE.match(label) for label in labels):
        raise ValueError(f"Malformed domain: {domain!r}")
    return labels


def classify_authority(raw_domain: str, top_domains: Collection[str] = TOP_DOMAINS) -> DomainAuthority:
    """Map a domain to a coarse authority tier.

    Exact curated match -> high (rank 1); a curated parent of a 3+ label
    domain -> high (rank 100); an enterprise-looking shape -> medium;
    anything else -> low. Never raises: malformed input is low.
    """
    try:
        domain = normalize_domain(raw_domain)
        labels = _checked_labels(domain)

        if domain in top_domains:
            return DomainAuthority(rank=_EXACT_RANK, is_top_site=True, authority="high")

        if len(labels) > 2:
            parent = ".".join(labels[-2:])
            if parent in top_domains:
                return DomainAuthority(rank=_PARENT_RANK, is_top_site=True, authority="high")

        is_enterprise = any(p.search(domain) for p in _ENTERPRISE_PATTERNS)
        return DomainAuthority(rank=None, is_top_site=False, authority="medium" if is_enterprise else "low")
    except Exception as e:
        logger.warning("Domain authority lookup failed for %r: %s", raw_domain, e)
        return LOW_AUTHORITY
