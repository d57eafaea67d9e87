"""Shared segment formatting helpers.

Keeping formatting here prevents drift between output modes and keeps
linkified comments consistent regardless of where they are displayed.
Rich preview cards themselves are drawn by the real renderer; these helpers
only stand a labelled link in their place.
"""

from __future__ import annotations

import html
import json
from typing import Iterable

from core.models import BookRef, LinkReference, PreviewSegment, Segment, segments_to_payload

FORMATS = ("plain", "markdown", "html", "json")


def format_reference_label(reference: LinkReference) -> str:
    """Return a short human-friendly label for a preview reference."""

    if isinstance(reference, BookRef):
        return f"Book #{reference.book_id}"
    return f"{reference.shelf_name} (shelf by {reference.username})"


def _format_plain(segments: Iterable[Segment]) -> str:
    parts = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            reference = segment.reference
            if isinstance(reference, BookRef):
                parts.append(f"[book:{reference.book_id}]")
            else:
                parts.append(f"[bookshelf:{reference.username}/{reference.shelf_name}]")
        else:
            parts.append(segment.text)
    return "".join(parts)


def _format_markdown(segments: Iterable[Segment], base_url: str) -> str:
    def escape_md(value: str) -> str:
        for ch in r"\*_[]`":
            value = value.replace(ch, f"\\{ch}")
        return value

    parts = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            reference = segment.reference
            label = escape_md(format_reference_label(reference))
            parts.append(f"[{label}]({base_url}{reference.content_url})")
        else:
            parts.append(escape_md(segment.text))
    return "".join(parts)


def _format_html(segments: Iterable[Segment], base_url: str) -> str:
    parts = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            reference = segment.reference
            href = html.escape(f"{base_url}{reference.content_url}")
            key = html.escape(reference.preview_key)
            label = html.escape(format_reference_label(reference))
            parts.append(
                f"<a class=\"linked-preview\" data-kind=\"{reference.kind}\" "
                f"data-key=\"{key}\" href=\"{href}\">{label}</a>"
            )
        else:
            parts.append(html.escape(segment.text))
    return "".join(parts)


def format_segments(segments: Iterable[Segment], mode: str, base_url: str = "") -> str:
    """Return the segments formatted for the requested mode."""

    segments = list(segments)
    base_url = base_url.rstrip("/")
    if mode == "plain":
        return _format_plain(segments)
    if mode == "markdown":
        return _format_markdown(segments, base_url)
    if mode == "html":
        return _format_html(segments, base_url)
    if mode == "json":
        return json.dumps(segments_to_payload(segments), ensure_ascii=False, indent=2)
    raise ValueError(f"Unsupported output format: {mode}")
