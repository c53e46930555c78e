"""Events processed by the serial event stream.

User input, resizes, spinner ticks and fetch completions all arrive as one
of these and are handled one at a time by PaneCoordinator.handle().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..models.message import Message


class FetchTarget(Enum):
    """Which part of the UI a fetch populates."""

    TOP_LEVEL = "top-level"
    SUBSCRIPTIONS = "subscriptions"
    MESSAGES = "messages"


class Event:
    """Marker base class for stream events."""


@dataclass(frozen=True)
class KeyPressed(Event):
    key: str


@dataclass(frozen=True)
class Resized(Event):
    width: int
    height: int


@dataclass(frozen=True)
class SpinnerTick(Event):
    pass


@dataclass(frozen=True)
class TopLevelLoaded(Event):
    topics: Tuple[str, ...]
    queues: Tuple[str, ...]


@dataclass(frozen=True)
class SubscriptionsLoaded(Event):
    topic_id: str
    subscriptions: Tuple[str, ...]


@dataclass(frozen=True)
class MessagesLoaded(Event):
    messages: Tuple[Message, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FetchFailed(Event):
    """A provider call failed or timed out.

    Attributes:
        target: Fetch kind that failed
        error: Human-readable failure text shown inline in the pane
        key: Node id the fetch was issued for, if any
    """

    target: FetchTarget
    error: str
    key: Optional[str] = None


@dataclass(frozen=True)
class MessageGroupSelected(Event):
    topic_name: str
    subscription_name: str
    dead_letter: bool


@dataclass(frozen=True)
class MessageHighlighted(Event):
    """The message list cursor moved to a row."""

    row: int
