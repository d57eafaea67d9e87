"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any renderer-specific types. References carry identifying fields
only; how a preview card looks is the renderer's business.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Union
from urllib.parse import quote


def encode_component(value: str) -> str:
    """Percent-encode a value the way browsers encode a URI component."""

    return quote(value, safe="-_.!~*'()")


@dataclass(frozen=True)
class BookRef:
    """Reference to a single book listing."""

    book_id: int

    kind = "book"

    @property
    def content_url(self) -> str:
        return f"/books/{self.book_id}"

    @property
    def api_path(self) -> str:
        return f"/api/books/{self.book_id}"

    @property
    def preview_key(self) -> str:
        return f"book-{self.book_id}"


@dataclass(frozen=True)
class BookshelfRef:
    """Reference to a shelf shared by its owner."""

    username: str
    shelf_name: str

    kind = "bookshelf"

    @property
    def _query(self) -> str:
        return f"username={encode_component(self.username)}&shelfname={encode_component(self.shelf_name)}"

    @property
    def content_url(self) -> str:
        return f"/book-shelf/share?{self._query}"

    @property
    def api_path(self) -> str:
        return f"/api/book-shelf?{self._query}"

    @property
    def preview_key(self) -> str:
        return f"shelf-{self.username}-{self.shelf_name}"


LinkReference = Union[BookRef, BookshelfRef]


@dataclass(frozen=True)
class TextSegment:
    """Literal text, rendered character for character."""

    text: str


@dataclass(frozen=True)
class PreviewSegment:
    """A rich preview standing in for an internal link."""

    reference: LinkReference


Segment = Union[TextSegment, PreviewSegment]


def reference_to_payload(reference: LinkReference) -> dict[str, Any]:
    if isinstance(reference, BookRef):
        fields: dict[str, Any] = {"id": reference.book_id}
    else:
        fields = {"username": reference.username, "shelfName": reference.shelf_name}
    return {
        "type": "preview",
        "kind": reference.kind,
        **fields,
        "key": reference.preview_key,
        "url": reference.content_url,
        "api": reference.api_path,
    }


def segments_to_payload(segments: Iterable[Segment]) -> List[dict[str, Any]]:
    """Return a JSON-ready list describing the segments in order."""

    payload: List[dict[str, Any]] = []
    for segment in segments:
        if isinstance(segment, PreviewSegment):
            payload.append(reference_to_payload(segment.reference))
        else:
            payload.append({"type": "text", "text": segment.text})
    return payload
