"""Message list pane."""

from typing import List, Optional, Tuple

from rich.highlighter import JSONHighlighter
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Static

from ...core.messages_pane import Column, MessageRow, MessagesPane, PaneStatus
from ..theme import RenderTheme

_json = JSONHighlighter()

# Keys the table handles itself, mapped to its cursor actions.
TABLE_ACTIONS = {
    "up": "cursor_up",
    "k": "cursor_up",
    "down": "cursor_down",
    "j": "cursor_down",
    "pageup": "page_up",
    "pagedown": "page_down",
    "home": "scroll_top",
    "g": "scroll_top",
    "end": "scroll_bottom",
    "G": "scroll_bottom",
}


def render_status(pane: MessagesPane, theme: RenderTheme, spinner: str) -> Optional[Text]:
    """Text shown in place of the table, or None when there are rows."""
    status = pane.status
    if status is PaneStatus.IDLE:
        return Text("Select a message node and press Enter", style=theme.subtle)
    if status is PaneStatus.LOADING:
        return Text.assemble(f"{spinner} ", ("Loading messages...", theme.subtle))
    if status is PaneStatus.ERROR:
        return Text(f"Error: {pane.error}", style=theme.error_style)
    if status is PaneStatus.EMPTY:
        return Text("No messages found", style=theme.subtle)
    return None


def row_cells(row: MessageRow) -> Tuple[str, str, str, str, Text]:
    preview = Text(row.body_preview, no_wrap=True, overflow="ellipsis")
    if row.body_is_json:
        _json.highlight(preview)
    return (row.sequence, row.message_id, row.subject, row.enqueued, preview)


class MessageListView(Vertical):
    """Middle pane: peeked messages of the selected subscription."""

    DEFAULT_CSS = """
    MessageListView > #messages-status {
        height: auto;
        padding: 0 1;
    }

    MessageListView > #messages-table {
        height: 1fr;
        overflow-x: hidden;
        scrollbar-size-vertical: 1;
    }
    """

    def __init__(self, theme: RenderTheme, *, id: str = "messages-pane"):
        super().__init__(id=id)
        self.render_theme = theme
        self._generation = -1
        self._columns: List[Column] = []

    def compose(self) -> ComposeResult:
        yield Static("", id="messages-status")
        yield DataTable(id="messages-table", cursor_type="row")

    @property
    def table(self) -> DataTable:
        return self.query_one("#messages-table", DataTable)

    def show(self, pane: MessagesPane, spinner: str, focused: bool) -> None:
        self.styles.border = ("round", self.render_theme.border_color(focused))
        self.border_title = pane.title

        status = self.query_one("#messages-status", Static)
        message = render_status(pane, self.render_theme, spinner)
        status.display = message is not None
        self.table.display = message is None
        if message is not None:
            status.update(message)
            self.border_subtitle = ""
        else:
            self.border_subtitle = f"{pane.cursor + 1}/{len(pane.rows)}"

        if pane.generation != self._generation or pane.columns != self._columns:
            self._populate(pane)

    def _populate(self, pane: MessagesPane) -> None:
        """Reload columns and rows from the pane, keeping its cursor."""
        table = self.table
        table.clear(columns=True)
        for column in pane.columns:
            table.add_column(column.title, width=column.width)
        for row in pane.rows:
            table.add_row(*row_cells(row))
        if pane.rows:
            table.move_cursor(row=pane.cursor)
        self._generation = pane.generation
        self._columns = list(pane.columns)

    def navigate(self, key: str) -> bool:
        """Move the table cursor for a navigation key."""
        action = TABLE_ACTIONS.get(key)
        if action is None or not self.table.row_count:
            return False
        getattr(self.table, f"action_{action}")()
        return True
