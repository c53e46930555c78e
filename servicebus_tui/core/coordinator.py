"""Pane coordination.

PaneCoordinator is the single consumer of the serial event stream. It owns
pane focus and sizing. Selections flow from the tree into the messages pane
and from the messages cursor into the detail pane.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..providers.base import ResourceProvider
from .cache import SubscriptionCache
from .config import ExplorerConfig, LayoutConfig
from .detail_pane import DetailPane
from .events import (
    Event,
    FetchFailed,
    FetchTarget,
    KeyPressed,
    MessageGroupSelected,
    MessageHighlighted,
    MessagesLoaded,
    Resized,
    SpinnerTick,
    SubscriptionsLoaded,
    TopLevelLoaded,
)
from .fetch import FetchDispatcher
from .messages_pane import MessagesPane
from .resource_tree import ResourceTree

logger = logging.getLogger(__name__)

BORDER_WIDTH = 2


class Pane(Enum):
    TREE = "tree"
    MESSAGES = "messages"
    DETAIL = "detail"


PANE_ORDER = (Pane.TREE, Pane.MESSAGES, Pane.DETAIL)


@dataclass(frozen=True)
class PaneLayout:
    """Outer pane widths (borders included) and the shared content height."""

    tree_width: int
    messages_width: int
    detail_width: int
    content_height: int


def compute_layout(width: int, height: int, config: Optional[LayoutConfig] = None) -> PaneLayout:
    """Split the terminal between the three panes.

    The tree and detail panes take fixed shares with floors; the messages
    pane gets the remainder, never below its own floor.
    """
    config = config or LayoutConfig()
    tree = max(width * config.tree_percent // 100, config.tree_min_width)
    detail = max(width * config.detail_percent // 100, config.detail_min_width)
    messages = max(width - tree - detail, config.messages_min_width)
    content_height = max(height - config.chrome_height, config.min_content_height)
    return PaneLayout(tree, messages, detail, content_height)


class PaneCoordinator:
    """Owns the three panes and processes events one at a time."""

    def __init__(
        self,
        provider: ResourceProvider,
        dispatcher: FetchDispatcher,
        config: Optional[ExplorerConfig] = None,
        cache: Optional[SubscriptionCache] = None,
    ):
        self.config = config or ExplorerConfig()
        self.tree = ResourceTree(provider, dispatcher, cache)
        self.messages = MessagesPane(provider, dispatcher, peek_limit=self.config.peek_limit)
        self.detail = DetailPane()
        self.focus = Pane.TREE
        self.layout = compute_layout(0, 0, self.config.layout)
        self.spinner_frame = 0
        # Cursor position last pushed into the detail pane.
        self._detail_cursor = -1

    def start(self) -> None:
        self.tree.load()

    def handle(self, event: Event) -> bool:
        """Apply one event. Returns True if the panes need re-rendering."""
        if isinstance(event, KeyPressed):
            return self._on_key(event.key)
        if isinstance(event, Resized):
            self.resize(event.width, event.height)
            return True
        if isinstance(event, SpinnerTick):
            if not self.is_loading:
                return False
            self.spinner_frame += 1
            return True
        if isinstance(event, TopLevelLoaded):
            self.tree.apply_top_level(event)
            return True
        if isinstance(event, SubscriptionsLoaded):
            self.tree.apply_subscriptions(event)
            return True
        if isinstance(event, MessageGroupSelected):
            self._on_message_group_selected(event)
            return True
        if isinstance(event, MessageHighlighted):
            if self.messages.highlight(event.row):
                self._sync_detail()
                return True
            return False
        if isinstance(event, MessagesLoaded):
            self._on_messages_loaded(event)
            return True
        if isinstance(event, FetchFailed):
            self._on_fetch_failed(event)
            return True
        logger.debug(f"Unhandled event {event!r}")
        return False

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        self.layout = compute_layout(width, height, self.config.layout)
        height = self.layout.content_height
        self.tree.set_visible_height(height)
        self.messages.set_size(self.layout.messages_width - BORDER_WIDTH, height)

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------

    def is_enabled(self, pane: Pane) -> bool:
        if pane is Pane.MESSAGES:
            return self.messages.has_messages
        if pane is Pane.DETAIL:
            return self.messages.selected_message is not None
        return True

    def focus_pane(self, pane: Pane) -> bool:
        if not self.is_enabled(pane):
            return False
        self.focus = pane
        return True

    def cycle_focus(self) -> None:
        """Move focus to the next enabled pane in tree, messages, detail order."""
        start = PANE_ORDER.index(self.focus)
        for step in range(1, len(PANE_ORDER) + 1):
            if self.focus_pane(PANE_ORDER[(start + step) % len(PANE_ORDER)]):
                return

    def go_back(self) -> bool:
        if self.focus is Pane.DETAIL:
            return self.focus_pane(Pane.MESSAGES) or self.focus_pane(Pane.TREE)
        if self.focus is Pane.MESSAGES:
            return self.focus_pane(Pane.TREE)
        return False

    def _ensure_valid_focus(self) -> None:
        if not self.is_enabled(self.focus):
            self.focus_pane(Pane.TREE)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    def _on_key(self, key: str) -> bool:
        if key == "tab":
            self.cycle_focus()
            return True
        if key == "escape":
            return self.go_back()

        if self.focus is not Pane.TREE:
            # The message table and detail scroller consume their own keys.
            return False
        emitted = self.tree.handle_key(key)
        if emitted is not None:
            self.handle(emitted)
        return True

    def _on_message_group_selected(self, event: MessageGroupSelected) -> None:
        logger.info(
            f"Selected {event.topic_name}/{event.subscription_name} "
            f"({'dlq' if event.dead_letter else 'active'})"
        )
        self.messages.load_messages(event.topic_name, event.subscription_name, event.dead_letter)
        self.detail.set_message(None)
        self._detail_cursor = -1
        self._ensure_valid_focus()

    def _on_messages_loaded(self, event: MessagesLoaded) -> None:
        self.messages.apply_loaded(event)
        self._detail_cursor = -1
        if self.messages.has_messages:
            self.focus_pane(Pane.MESSAGES)
            self._sync_detail()
        else:
            self.detail.set_message(None)
            self._ensure_valid_focus()

    def _on_fetch_failed(self, event: FetchFailed) -> None:
        if event.target is FetchTarget.TOP_LEVEL:
            self.tree.apply_top_level_failure(event.error)
        elif event.target is FetchTarget.SUBSCRIPTIONS:
            self.tree.apply_subscriptions_failure(event.key, event.error)
        else:
            self.messages.apply_failure(event.error)
            self._ensure_valid_focus()

    def _sync_detail(self) -> None:
        """Push the highlighted message into the detail pane if the cursor moved."""
        selected = self.messages.selected_message
        if selected is None:
            return
        cursor = self.messages.cursor
        if cursor != self._detail_cursor:
            self._detail_cursor = cursor
            self.detail.set_message(selected)

    @property
    def is_loading(self) -> bool:
        return self.tree.any_loading or self.messages.loading
