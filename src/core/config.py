"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so the CLI and other callers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SITE_DOMAIN = "sirened.com"


@dataclass(frozen=True)
class SiteConfig:
    """Identity of the hosting site, used to tell internal links from external ones."""

    domain: str = DEFAULT_SITE_DOMAIN

