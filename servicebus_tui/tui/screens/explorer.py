"""Explorer screen.

Drives the core: key bindings, resizes, spinner ticks, completed fetches
and table highlights each become one core event handled by the
PaneCoordinator, after which the panes are re-rendered. Navigation keys in
the message and detail panes go to their Textual widgets first. Textual
processes messages one at a time, so core state is only ever touched from
this screen's message loop.
"""

import logging
from typing import Optional

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.screen import Screen
from textual.widgets import DataTable, Static

from ...core.config import ExplorerConfig
from ...core.coordinator import Pane, PaneCoordinator
from ...core.events import Event, KeyPressed, MessageHighlighted, Resized, SpinnerTick
from ...core.fetch import FetchRequest, resolve_fetch
from ...providers.base import ResourceProvider
from ..theme import RenderTheme, spinner_frame
from ..widgets import MessageDetailView, MessageListView, ResourceTreeView

logger = logging.getLogger(__name__)

HELP_TEXT = "tab: switch pane • ↑↓/jk: navigate • →/l/enter: expand • ←/h: collapse • esc: back • q: quit"

ROUTED_KEYS = (
    "tab", "escape", "up", "down", "left", "right", "enter",
    "k", "j", "h", "l", "pageup", "pagedown", "home", "end", "g", "G", "ctrl+r",
)


class FetchCompleted(Message):
    """A background fetch finished; carries the resulting core event."""

    def __init__(self, event: Event):
        super().__init__()
        self.event = event


class WorkerDispatcher:
    """Runs fetch requests as Textual workers and posts the results back."""

    def __init__(self, screen: Screen, timeout: float):
        self._screen = screen
        self._timeout = timeout

    def submit(self, request: FetchRequest) -> None:
        logger.debug(f"Dispatching fetch: {request.description or request.target.value}")
        self._screen.run_worker(
            self._resolve(request),
            group=request.target.value,
            description=request.description,
            exit_on_error=False,
        )

    async def _resolve(self, request: FetchRequest) -> None:
        event = await resolve_fetch(request, self._timeout)
        self._screen.post_message(FetchCompleted(event))


class ExplorerScreen(Screen):
    """Three-pane namespace explorer.

    Keyboard shortcuts:
    - ↑/↓, k/j: Navigate the focused pane
    - →/l/Enter: Expand node or load a message group
    - ←/h: Collapse node
    - Tab: Cycle pane focus
    - Esc: Back to the previous pane
    - Ctrl+R: Reload topics and queues
    - q: Quit
    """

    BINDINGS = [
        Binding(key, f"route({key!r})", show=False, priority=True)
        for key in ROUTED_KEYS
    ]

    CSS = """
    #namespace-bar {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    #panes {
        height: 1fr;
    }

    #tree-pane {
        padding: 0 1;
        overflow: hidden;
    }

    #help-bar {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        provider: ResourceProvider,
        config: Optional[ExplorerConfig] = None,
        theme: Optional[RenderTheme] = None,
    ):
        super().__init__()
        self.provider = provider
        self.config = config or ExplorerConfig()
        self.render_theme = theme or RenderTheme.from_config(self.config.theme)
        self.dispatcher = WorkerDispatcher(self, timeout=self.config.fetch_timeout)
        self.coordinator = PaneCoordinator(provider, self.dispatcher, self.config)

    def compose(self) -> ComposeResult:
        yield Static(f"Namespace: {self.provider.namespace}", id="namespace-bar")
        with Horizontal(id="panes"):
            yield ResourceTreeView(self.render_theme)
            yield MessageListView(self.render_theme)
            yield MessageDetailView(self.render_theme)
        yield Static(HELP_TEXT, id="help-bar")

    def on_mount(self) -> None:
        self.query_one(ResourceTreeView).border_title = "Resources"
        self.coordinator.start()
        self.process_event(Resized(self.size.width, self.size.height))
        self.set_interval(self.config.spinner_interval, self._tick)

    def on_resize(self, event: events.Resize) -> None:
        self.process_event(Resized(event.size.width, event.size.height))

    def on_fetch_completed(self, message: FetchCompleted) -> None:
        self.process_event(message.event)

    def action_route(self, key: str) -> None:
        focus = self.coordinator.focus
        if focus is Pane.MESSAGES and self.query_one(MessageListView).navigate(key):
            return
        if focus is Pane.DETAIL and self.query_one(MessageDetailView).navigate(key):
            return
        self.process_event(KeyPressed(key))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.process_event(MessageHighlighted(event.cursor_row))

    def _tick(self) -> None:
        self.process_event(SpinnerTick())

    def process_event(self, event: Event) -> None:
        """Hand one event to the coordinator and re-render if needed."""
        if not self.coordinator.handle(event):
            return
        if isinstance(event, Resized):
            self._apply_layout()
        self.refresh_panes()

    def _apply_layout(self) -> None:
        layout = self.coordinator.layout
        pane_height = layout.content_height + 2
        for view, width in (
            (self.query_one(ResourceTreeView), layout.tree_width),
            (self.query_one(MessageListView), layout.messages_width),
            (self.query_one(MessageDetailView), layout.detail_width),
        ):
            view.styles.width = width
            view.styles.height = pane_height

    def refresh_panes(self) -> None:
        coordinator = self.coordinator
        spinner = spinner_frame(coordinator.spinner_frame)
        self.query_one(ResourceTreeView).show(
            coordinator.tree, spinner, coordinator.focus is Pane.TREE
        )
        self.query_one(MessageListView).show(
            coordinator.messages, spinner, coordinator.focus is Pane.MESSAGES
        )
        self.query_one(MessageDetailView).show(
            coordinator.detail, coordinator.focus is Pane.DETAIL
        )
