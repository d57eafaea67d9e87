"""Shared constants for the Textual UI."""

from __future__ import annotations

SIRENED_EMERALD = "#10B981"
PREVIEW_STYLE = f"bold {SIRENED_EMERALD}"
STATUS_STYLE = "dim italic"
