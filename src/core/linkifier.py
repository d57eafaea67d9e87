"""Core comment linkifier.

The linkifier enforces a strict order:
1) Run every rule, in priority order, against the original message
2) Keep only claims that do not overlap a higher-priority claim
3) Number preview claims left to right and bind their references
4) Apply all edits to the original text in a single pass

Edits are spans against the untouched input, so nothing the user typed can
collide with an internal marker. This module is renderer-agnostic.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from core.config import SiteConfig
from core.link_rules import MatchRule, RuleAction, build_rules
from core.models import LinkReference, PreviewSegment, Segment, TextSegment

LOGGER = logging.getLogger(__name__)

DEFAULT_MARKER = "\ufffc"


@dataclass(frozen=True)
class LinkEdit:
    """A claimed span of the original message and what to do with it."""

    start: int
    end: int
    action: RuleAction
    index: Optional[int] = None


def collect_edits(
    text: str, rules: Iterable[MatchRule]
) -> Tuple[List[LinkEdit], List[LinkReference]]:
    """Return span edits sorted by position, plus the preview bindings."""

    # Claims never overlap, so sorted by start they are also sorted by end and
    # only the nearest neighbours need checking.
    starts: List[int] = []
    claims: List[Tuple[int, int, RuleAction, Optional[LinkReference]]] = []
    for rule in rules:
        for match in rule.pattern.finditer(text):
            start, end = match.span()
            position = bisect_left(starts, start)
            if position > 0 and claims[position - 1][1] > start:
                continue
            if position < len(starts) and starts[position] < end:
                continue
            hit = rule.extract(match)
            if hit is None:
                continue
            starts.insert(position, start)
            claims.insert(position, (start, end, hit.action, hit.reference))

    edits: List[LinkEdit] = []
    bindings: List[LinkReference] = []
    for start, end, action, reference in claims:
        if action is RuleAction.PREVIEW:
            edits.append(LinkEdit(start, end, action, index=len(bindings)))
            bindings.append(reference)
        else:
            edits.append(LinkEdit(start, end, action))
    return edits, bindings


def resolve_segments(
    text: str, edits: Iterable[LinkEdit], bindings: Sequence[LinkReference]
) -> List[Segment]:
    """Apply edits to the original text and emit segments in document order.

    Preview edits whose index has no binding degrade to their literal text.
    """

    segments: List[Segment] = []
    pending: List[str] = []

    def flush() -> None:
        joined = "".join(pending)
        pending.clear()
        if joined:
            segments.append(TextSegment(joined))

    cursor = 0
    for edit in sorted(edits, key=lambda item: item.start):
        if edit.start < cursor:
            continue
        pending.append(text[cursor : edit.start])
        if edit.action is RuleAction.PREVIEW:
            if edit.index is not None and 0 <= edit.index < len(bindings):
                flush()
                segments.append(PreviewSegment(bindings[edit.index]))
            else:
                LOGGER.warning("Unresolvable preview placeholder %s kept as text", edit.index)
                pending.append(text[edit.start : edit.end])
        elif edit.action is RuleAction.KEEP:
            pending.append(text[edit.start : edit.end])
        else:
            # Stripped URLs split the surrounding text into separate segments.
            flush()
        cursor = edit.end
    pending.append(text[cursor:])
    flush()

    return segments


class Linkifier:
    """Turns raw comment text into text and preview segments."""

    def __init__(self, rules: Iterable[MatchRule]) -> None:
        self._rules = list(rules)

    @classmethod
    def for_site(cls, site: SiteConfig) -> "Linkifier":
        return cls(build_rules(site))

    def parse(self, content: str) -> List[Segment]:
        """Parse one message. Never raises; worst case the text comes back whole."""

        content = content or ""
        if not content.strip():
            return [TextSegment(content)]

        try:
            edits, bindings = collect_edits(content, self._rules)
            if not edits:
                return [TextSegment(content)]
            segments = resolve_segments(content, edits, bindings)
        except Exception:
            LOGGER.exception("Linkifier failed, rendering message as plain text")
            return [TextSegment(content)]

        if not segments:
            return [TextSegment("")]

        LOGGER.debug(
            "Parsed message: previews=%s, stripped=%s, segments=%s",
            len(bindings),
            sum(1 for edit in edits if edit.action is RuleAction.STRIP),
            len(segments),
        )
        return segments


def parse_message(
    content: str,
    rules: Optional[Iterable[MatchRule]] = None,
    site: Optional[SiteConfig] = None,
) -> List[Segment]:
    """Parse a raw comment into segments using the given rules or site."""

    if rules is None:
        rules = build_rules(site)
    return Linkifier(rules).parse(content)


def reconstruct(segments: Iterable[Segment], marker: str = DEFAULT_MARKER) -> str:
    """Join text segments, writing ``marker`` where each preview sits."""

    parts: List[str] = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            parts.append(marker)
        else:
            parts.append(segment.text)
    return "".join(parts)
