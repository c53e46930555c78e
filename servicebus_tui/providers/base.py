"""Provider interface between the explorer core and a messaging service.

Every method blocks; the core only ever calls them from worker threads via
core.fetch. Implementations raise ProviderError on failure.
"""

from abc import ABC, abstractmethod
from typing import List, NamedTuple

from ..models.message import Message


class TopLevelListing(NamedTuple):
    """Topics and queues of a namespace, in provider order."""

    topics: List[str]
    queues: List[str]


class ResourceProvider(ABC):
    """Lists topics, queues and subscriptions and peeks messages."""

    @property
    @abstractmethod
    def namespace(self) -> str:
        """Name of the namespace this provider is connected to."""

    @abstractmethod
    def list_top_level(self) -> TopLevelListing:
        """List topics and queues."""

    @abstractmethod
    def list_subscriptions(self, topic_name: str) -> List[str]:
        """List the subscriptions of a topic."""

    @abstractmethod
    def peek_messages(
        self,
        topic_name: str,
        subscription_name: str,
        dead_letter: bool,
        max_count: int,
    ) -> List[Message]:
        """Peek up to max_count messages without removing them."""

    def close(self) -> None:
        """Release connections held by the provider."""
