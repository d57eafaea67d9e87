"""Helpers for telling the site's own hosts apart from external ones."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

_SCHEME_PREFIX = re.compile(r"^https?://", re.IGNORECASE)


def normalize_host(host: str) -> str:
    """Lower-case a host and drop any port or trailing dot."""

    host = host.strip().lower()
    if host.startswith("["):
        return host
    host, _, _ = host.partition(":")
    return host.rstrip(".")


def is_site_host(host: Optional[str], domain: str) -> bool:
    """Return True for the site domain itself or one of its subdomains."""

    if not host:
        return False
    host = normalize_host(host)
    domain = normalize_host(domain)
    return host == domain or host.endswith(f".{domain}")


def url_host(url: str) -> Optional[str]:
    """Return the host of an http(s) or bare www. URL, or None if unparseable."""

    candidate = url if _SCHEME_PREFIX.match(url) else f"http://{url}"
    try:
        hostname = urlsplit(candidate).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return normalize_host(hostname)


def domain_pattern(domain: str) -> str:
    """Regex fragment for an optional scheme and www. in front of the domain."""

    return rf"(?:https?://)?(?:www\.)?{re.escape(normalize_host(domain))}"
