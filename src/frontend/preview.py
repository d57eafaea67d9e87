"""Rich renderables for showing linkifier output in the terminal."""

from __future__ import annotations

from typing import Iterable

from rich.text import Text

from adapters.segment_formatting import format_reference_label
from core.models import PreviewSegment, Segment

from .constants import PREVIEW_STYLE


def build_preview_text(segments: Iterable[Segment]) -> Text:
    """Assemble segments into one rich Text, previews shown as styled cards."""

    text = Text()
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            text.append(f"[{format_reference_label(segment.reference)}]", style=PREVIEW_STYLE)
        else:
            text.append(segment.text)
    return text


def build_reference_rows(segments: Iterable[Segment]) -> list[tuple[str, str, str]]:
    """Return (kind, key, url) rows for every preview, left to right."""

    rows: list[tuple[str, str, str]] = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            reference = segment.reference
            rows.append((reference.kind, reference.preview_key, reference.content_url))
    return rows
