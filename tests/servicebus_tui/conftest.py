"""Pytest configuration and shared fixtures for servicebus_tui tests."""

import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from servicebus_tui.core.config import ExplorerConfig
from servicebus_tui.core.coordinator import PaneCoordinator
from servicebus_tui.core.events import Event
from servicebus_tui.core.fetch import FetchRequest, resolve_fetch_sync
from servicebus_tui.core.resource_tree import ResourceTree
from servicebus_tui.errors import ProviderError
from servicebus_tui.logging_config import LOGGER_NAME
from servicebus_tui.models.message import Message
from servicebus_tui.providers.base import ResourceProvider, TopLevelListing

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_message(sequence: int, **overrides) -> Message:
    data = {
        "sequence_number": sequence,
        "message_id": f"msg-{sequence}",
        "subject": f"subject {sequence}",
        "enqueued_time": datetime(2024, 5, 1, 12, 0, sequence % 60, tzinfo=timezone.utc),
        "content_type": "application/json",
        "body": f'{{"n": {sequence}}}',
    }
    data.update(overrides)
    return Message(**data)


class FakeProvider(ResourceProvider):
    """In-memory provider that counts calls and can be told to fail."""

    def __init__(
        self,
        topics: Optional[List[str]] = None,
        queues: Optional[List[str]] = None,
        subscriptions: Optional[Dict[str, List[str]]] = None,
        messages: Optional[Dict[Tuple[str, str, bool], List[Message]]] = None,
    ):
        self.topics = topics if topics is not None else ["orders"]
        self.queues = queues if queues is not None else ["invoices"]
        self.subscriptions = subscriptions if subscriptions is not None else {"orders": ["billing"]}
        self.messages = messages or {}
        self.calls: Counter = Counter()
        self.peek_args: List[Tuple[str, str, bool, int]] = []
        self.failures: Dict[str, Exception] = {}

    @property
    def namespace(self) -> str:
        return "contoso-dev"

    def _maybe_fail(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation in self.failures:
            raise self.failures[operation]

    def list_top_level(self) -> TopLevelListing:
        self._maybe_fail("list_top_level")
        return TopLevelListing(list(self.topics), list(self.queues))

    def list_subscriptions(self, topic_name: str) -> List[str]:
        self._maybe_fail("list_subscriptions")
        if topic_name not in self.subscriptions:
            raise ProviderError(f"load subscriptions for {topic_name}", "topic not found")
        return list(self.subscriptions[topic_name])

    def peek_messages(self, topic_name, subscription_name, dead_letter, max_count):
        self._maybe_fail("peek_messages")
        self.peek_args.append((topic_name, subscription_name, dead_letter, max_count))
        return self.messages.get((topic_name, subscription_name, dead_letter), [])[:max_count]


class RecordingDispatcher:
    """Holds submitted fetches until a test resolves them, in any order."""

    def __init__(self):
        self.pending: List[FetchRequest] = []
        self.submitted: List[FetchRequest] = []

    def submit(self, request: FetchRequest) -> None:
        self.pending.append(request)
        self.submitted.append(request)

    def complete(self, index: int = 0) -> Event:
        """Run a pending request on this thread and return its event."""
        return resolve_fetch_sync(self.pending.pop(index))


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers and propagation set by setup_logging."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def tree(provider, dispatcher) -> ResourceTree:
    """A tree with its top-level listing already applied."""
    tree = ResourceTree(provider, dispatcher)
    tree.load()
    tree.apply_top_level(dispatcher.complete())
    return tree


@pytest.fixture
def coordinator(provider, dispatcher) -> PaneCoordinator:
    """A started coordinator sized to a 160x40 terminal with the tree loaded."""
    coordinator = PaneCoordinator(provider, dispatcher, ExplorerConfig())
    coordinator.start()
    coordinator.handle(dispatcher.complete())
    coordinator.resize(160, 40)
    return coordinator


@pytest.fixture
def snapshot_path() -> Path:
    return FIXTURES_DIR / "namespace_snapshot.json"


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def provider_factory():
    return FakeProvider
