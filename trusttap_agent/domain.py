from __future__ import annotations

import re

_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)


def normalize_domain(raw: str) -> str:
    """Lowercase a host string and drop a leading ``www.``."""
    value = (raw or "").strip().lower()
    value = _WWW_RE.sub("", value)
    if not value:
        raise ValueError("Please provide a domain.")
    return value


def root_brand(domain: str) -> str:
    """Second-to-last label of the domain (``shop.example.co`` -> ``example``)."""
    parts = normalize_domain(domain).split(".")
    if len(parts) >= 2:
        return parts[-2]
    return parts[0]
