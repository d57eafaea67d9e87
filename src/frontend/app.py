"""Textual playground for trying the linkifier on sample comments."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import DataTable, Footer, Static, TextArea

from core.linkifier import Linkifier

from .constants import SIRENED_EMERALD, STATUS_STYLE
from .preview import build_preview_text, build_reference_rows


class PlaygroundApp(App):
    """Type a comment on the left, see how it will be rendered on the right."""

    CSS = """
    Screen {
        background: #0b1210;
        color: #e8eef5;
    }

    #header {
        height: 3;
        padding: 0 2;
        border-bottom: solid #1f3a30;
    }

    #body {
        height: 1fr;
    }

    #input-panel, #output-panel {
        width: 1fr;
        padding: 1 2;
    }

    #comment-input {
        height: 1fr;
    }

    #rendered {
        height: auto;
        min-height: 5;
        border: round #1f3a30;
        padding: 0 1;
    }

    #references {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("ctrl+l", "clear_input", "Clear"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, linkifier: Linkifier, domain: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._linkifier = linkifier
        self._domain = domain

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            yield Static(self._title_text(), id="title")
        with Horizontal(id="body"):
            with Vertical(id="input-panel"):
                yield Static("Comment", classes="subtle")
                yield TextArea(id="comment-input")
            with Vertical(id="output-panel"):
                yield Static("Rendered", classes="subtle")
                yield Static("", id="rendered")
                yield Static("", id="status")
                yield DataTable(id="references", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#references", DataTable)
        table.add_column("kind", key="kind", width=10)
        table.add_column("key", key="key", width=28)
        table.add_column("url", key="url")
        table.zebra_stripes = True
        self.query_one("#comment-input", TextArea).focus()
        self._refresh("")

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._refresh(event.text_area.text)

    def action_clear_input(self) -> None:
        self.query_one("#comment-input", TextArea).text = ""

    def _refresh(self, content: str) -> None:
        segments = self._linkifier.parse(content)
        self.query_one("#rendered", Static).update(build_preview_text(segments))

        rows = build_reference_rows(segments)
        table = self.query_one("#references", DataTable)
        table.clear()
        for row in rows:
            table.add_row(*row)

        status = Text(f"{len(segments)} segment(s), {len(rows)} preview(s)", style=STATUS_STYLE)
        self.query_one("#status", Static).update(status)

    def _title_text(self) -> Text:
        return Text.assemble(
            ("LINKIFY", SIRENED_EMERALD),
            (f" > Playground ({self._domain})", "bold"),
        )
