"""Message list pane.

Holds the batch of peeked messages for one subscription view. Each load
replaces the batch wholesale and bumps `generation` so the table widget
knows to repopulate. Cursor movement and scrolling belong to the table;
the pane only records which row is highlighted.

There is no cancellation of an earlier load: if an older peek completes
after a newer one, its batch is what remains on screen. Loads are only
triggered from the single tree selection affordance, which keeps that
window small in interactive use.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..models.message import Message
from ..providers.base import ResourceProvider
from .events import FetchTarget, MessagesLoaded
from .fetch import FetchDispatcher, FetchRequest
from .text import format_timestamp, normalize_whitespace, parse_json, truncate

logger = logging.getLogger(__name__)

DEFAULT_PEEK_LIMIT = 100
BODY_PREVIEW_LENGTH = 50
CELL_LENGTH = 20


class PaneStatus(Enum):
    """What the messages pane is currently showing."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


class Column(NamedTuple):
    title: str
    width: int


@dataclass(frozen=True)
class ColumnSpec:
    """Fixed column allocation: share of the width, capped and floored."""

    title: str
    cap: int
    floor: int


COLUMN_SPECS: Tuple[ColumnSpec, ...] = (
    ColumnSpec("Seq#", cap=8, floor=4),
    ColumnSpec("Message ID", cap=24, floor=8),
    ColumnSpec("Subject", cap=20, floor=6),
    ColumnSpec("Enqueued", cap=20, floor=10),
)
BODY_COLUMN_TITLE = "Body (preview)"
BODY_COLUMN_FLOOR = 20
# One cell of padding either side of each of the five table columns.
COLUMN_CHROME = 10


def compute_columns(width: int) -> List[Column]:
    """Allocate column widths for a pane of the given inner width.

    The fixed columns each get a fifth of the available width, capped and
    floored; the body preview takes what is left, never below its floor.
    """
    available = max(width - COLUMN_CHROME, 0)
    share = available // 5
    columns = [
        Column(spec.title, max(spec.floor, min(spec.cap, share)))
        for spec in COLUMN_SPECS
    ]
    used = sum(column.width for column in columns)
    columns.append(Column(BODY_COLUMN_TITLE, max(BODY_COLUMN_FLOOR, available - used)))
    return columns


class MessageRow(NamedTuple):
    """Display cells for one message."""

    sequence: str
    message_id: str
    subject: str
    enqueued: str
    body_preview: str
    body_is_json: bool


def build_row(message: Message) -> MessageRow:
    is_json, _ = parse_json(message.body)
    return MessageRow(
        sequence=str(message.sequence_number),
        message_id=truncate(message.message_id, CELL_LENGTH),
        subject=truncate(message.subject or "", CELL_LENGTH),
        enqueued=format_timestamp(message.enqueued_time),
        body_preview=truncate(normalize_whitespace(message.body), BODY_PREVIEW_LENGTH),
        body_is_json=is_json,
    )


class MessagesPane:
    """Peeked messages for the selected subscription view."""

    def __init__(
        self,
        provider: ResourceProvider,
        dispatcher: FetchDispatcher,
        peek_limit: int = DEFAULT_PEEK_LIMIT,
    ):
        self.provider = provider
        self.dispatcher = dispatcher
        self.peek_limit = peek_limit
        self.topic_name: Optional[str] = None
        self.subscription_name: Optional[str] = None
        self.dead_letter = False
        self.messages: Tuple[Message, ...] = ()
        self.rows: List[MessageRow] = []
        self.columns: List[Column] = compute_columns(0)
        self.cursor = -1
        self.generation = 0
        self.loading = False
        self.loaded = False
        self.error: Optional[str] = None
        self.width = 0
        self.height = 0

    def load_messages(self, topic_name: str, subscription_name: str, dead_letter: bool) -> None:
        """Clear the batch and peek the given subscription view."""
        self.topic_name = topic_name
        self.subscription_name = subscription_name
        self.dead_letter = dead_letter
        self.loading = True
        self.loaded = False
        self.error = None
        self._replace(())

        label = "dead-letter queue" if dead_letter else "active messages"
        self.dispatcher.submit(FetchRequest(
            target=FetchTarget.MESSAGES,
            call=lambda: self.provider.peek_messages(
                topic_name, subscription_name, dead_letter, self.peek_limit
            ),
            on_success=_messages_event,
            description=f"peek {label} of {topic_name}/{subscription_name}",
        ))

    def apply_loaded(self, event: MessagesLoaded) -> None:
        self.loading = False
        self.loaded = True
        self.error = None
        self._replace(event.messages)
        logger.info(f"Loaded {len(self.messages)} messages")

    def apply_failure(self, error: str) -> None:
        self.loading = False
        self.error = error

    def _replace(self, messages: Sequence[Message]) -> None:
        self.messages = tuple(messages)
        self.rows = [build_row(message) for message in self.messages]
        self.cursor = 0 if self.rows else -1
        self.generation += 1

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.columns = compute_columns(width)

    def highlight(self, row: int) -> bool:
        """Record the highlighted row. Returns True if it changed."""
        if not 0 <= row < len(self.rows) or row == self.cursor:
            return False
        self.cursor = row
        return True

    @property
    def has_messages(self) -> bool:
        return bool(self.messages)

    @property
    def selected_message(self) -> Optional[Message]:
        if 0 <= self.cursor < len(self.messages):
            return self.messages[self.cursor]
        return None

    @property
    def status(self) -> PaneStatus:
        if self.loading:
            return PaneStatus.LOADING
        if self.error:
            return PaneStatus.ERROR
        if not self.loaded:
            return PaneStatus.IDLE
        if not self.messages:
            return PaneStatus.EMPTY
        return PaneStatus.READY

    @property
    def title(self) -> str:
        if self.topic_name is None:
            return "Messages"
        view = "DLQ" if self.dead_letter else "Active"
        return f"{self.topic_name}/{self.subscription_name} ({view})"


def _messages_event(messages: Sequence[Message]) -> MessagesLoaded:
    return MessagesLoaded(messages=tuple(messages))
