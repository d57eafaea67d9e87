"""Link rule compilation and extraction logic (core domain)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import unquote

from core.config import SiteConfig
from core.models import BookRef, BookshelfRef, LinkReference
from core.site_hosts import domain_pattern, is_site_host, normalize_host, url_host

LOGGER = logging.getLogger(__name__)

# Zero-width boundaries: a link must sit between whitespace or the ends of the
# message, and the surrounding whitespace stays in the literal text.
_LEFT = r"(?<!\S)"
_RIGHT = r"(?!\S)"

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class RuleAction(Enum):
    """What happens to the span a rule claims."""

    PREVIEW = "preview"
    KEEP = "keep"
    STRIP = "strip"


@dataclass(frozen=True)
class RuleHit:
    """Outcome of a rule for one match."""

    action: RuleAction
    reference: Optional[LinkReference] = None


@dataclass(frozen=True)
class MatchRule:
    """Compiled rule used by the linkifier.

    ``extract`` returns None when the rule declines the match, leaving the
    text for lower-priority rules or for literal output.
    """

    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], Optional[RuleHit]]


def decode_component(value: str) -> Optional[str]:
    """Percent-decode a query value, or return None when it is malformed."""

    if _MALFORMED_ESCAPE.search(value):
        return None
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return None


def _extract_book(match: re.Match) -> Optional[RuleHit]:
    return RuleHit(RuleAction.PREVIEW, BookRef(book_id=int(match.group("book_id"))))


def _extract_bookshelf(match: re.Match) -> Optional[RuleHit]:
    username = decode_component(match.group("username"))
    shelf_name = decode_component(match.group("shelf_name"))
    if username is None or shelf_name is None:
        LOGGER.debug("Undecodable bookshelf link kept as text: %r", match.group(0))
        return None
    return RuleHit(RuleAction.PREVIEW, BookshelfRef(username=username, shelf_name=shelf_name))


def _keep(match: re.Match) -> Optional[RuleHit]:
    return RuleHit(RuleAction.KEEP)


def _external_url_extractor(domain: str) -> Callable[[re.Match], Optional[RuleHit]]:
    def extract(match: re.Match) -> Optional[RuleHit]:
        url = match.group(0)
        host = url_host(url)
        if host is None:
            # Only a confirmed site host is kept.
            LOGGER.debug("Unparseable URL stripped: %r", url)
            return RuleHit(RuleAction.STRIP)
        # Same-site URLs that no specific rule recognized pass through verbatim.
        if is_site_host(host, domain):
            return RuleHit(RuleAction.KEEP)
        return RuleHit(RuleAction.STRIP)

    return extract


def build_rules(site: Optional[SiteConfig] = None) -> List[MatchRule]:
    """Compile the link rules for a site, in priority order.

    Order matters: book and bookshelf links must be claimed before the
    generic URL rule sees them, and a bare mention of the domain must be
    protected before the generic rule could strip it.
    """

    site = site or SiteConfig()
    prefix = domain_pattern(site.domain)
    bare_domain = re.escape(normalize_host(site.domain))

    return [
        MatchRule(
            name="book-link",
            pattern=re.compile(rf"{_LEFT}(?i:{prefix})?/books/(?P<book_id>[0-9]+){_RIGHT}"),
            extract=_extract_book,
        ),
        MatchRule(
            name="bookshelf-link",
            pattern=re.compile(
                rf"{_LEFT}(?i:{prefix})?/book-shelf/share\?"
                rf"username=(?P<username>[^&\s]+)&shelfname=(?P<shelf_name>[^&\s]+){_RIGHT}"
            ),
            extract=_extract_bookshelf,
        ),
        MatchRule(
            name="bare-domain",
            pattern=re.compile(rf"{_LEFT}(?i:{bare_domain}){_RIGHT}"),
            extract=_keep,
        ),
        MatchRule(
            name="external-url",
            pattern=re.compile(rf"{_LEFT}(?i:https?://|www\.)\S+"),
            extract=_external_url_extractor(site.domain),
        ),
    ]
