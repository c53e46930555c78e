"""Message detail pane."""

from typing import Callable, Dict

from rich.highlighter import JSONHighlighter
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ...core.detail_pane import LABEL_WIDTH, DetailLine, DetailPane, LineKind
from ..theme import RenderTheme

_json = JSONHighlighter()

_UNSET = object()


def render_line(line: DetailLine, theme: RenderTheme) -> Text:
    if line.kind is LineKind.HEADING:
        return Text(line.text, style=theme.heading)
    if line.kind is LineKind.SEPARATOR:
        return Text(line.plain, style=theme.subtle)
    if line.kind is LineKind.FIELD:
        return Text.assemble(
            ((line.label + ":").ljust(LABEL_WIDTH), theme.label),
            " ",
            line.text,
        )
    text = Text(line.text)
    if line.is_json:
        _json.highlight(text)
    return text


def render_detail(pane: DetailPane, theme: RenderTheme) -> Text:
    if pane.message is None:
        return Text("No message selected", style=theme.subtle)
    return Text("\n").join(render_line(line, theme) for line in pane.lines)


class MessageDetailView(VerticalScroll):
    """Right pane: properties and body of the highlighted message.

    Lines are clipped rather than wrapped, so one buffer line is one
    screen row and scrolling moves by whole lines.
    """

    DEFAULT_CSS = """
    MessageDetailView {
        overflow-x: hidden;
        scrollbar-size-vertical: 1;
    }

    MessageDetailView > #detail-body {
        width: 100%;
        padding: 0 1;
        text-wrap: nowrap;
        text-overflow: ellipsis;
    }
    """

    def __init__(self, theme: RenderTheme, *, id: str = "detail-pane"):
        super().__init__(id=id)
        self.render_theme = theme
        self._shown: object = _UNSET

    def compose(self) -> ComposeResult:
        yield Static("", id="detail-body")

    def show(self, pane: DetailPane, focused: bool) -> None:
        self.styles.border = ("round", self.render_theme.border_color(focused))
        self.query_one("#detail-body", Static).update(render_detail(pane, self.render_theme))
        if pane.message is not self._shown:
            self._shown = pane.message
            self.scroll_home(animate=False)

    def navigate(self, key: str) -> bool:
        """Scroll the body for a navigation key."""
        scroll = self._scrolls().get(key)
        if scroll is None:
            return False
        scroll(animate=False)
        return True

    def _scrolls(self) -> Dict[str, Callable[..., object]]:
        return {
            "up": self.scroll_up,
            "k": self.scroll_up,
            "down": self.scroll_down,
            "j": self.scroll_down,
            "pageup": self.scroll_page_up,
            "pagedown": self.scroll_page_down,
            "home": self.scroll_home,
            "g": self.scroll_home,
            "end": self.scroll_end,
            "G": self.scroll_end,
        }
