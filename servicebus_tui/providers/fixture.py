"""Snapshot provider backed by a JSON file.

Lets the explorer run against a recorded namespace without network access.
The file layout is:

    {
      "namespace": "contoso-dev",
      "queues": ["invoices"],
      "topics": {
        "orders": {
          "billing": {"active": [<message>, ...], "dlq": [<message>, ...]}
        }
      }
    }

Messages use the field names of models.Message.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Union

from pydantic import BaseModel, Field, ValidationError

from ..errors import ProviderError
from ..models.message import Message
from .base import ResourceProvider, TopLevelListing

logger = logging.getLogger(__name__)


class SubscriptionSnapshot(BaseModel):
    active: List[Message] = Field(default_factory=list)
    dlq: List[Message] = Field(default_factory=list)


class NamespaceSnapshot(BaseModel):
    namespace: str = "snapshot"
    queues: List[str] = Field(default_factory=list)
    topics: Dict[str, Dict[str, SubscriptionSnapshot]] = Field(default_factory=dict)


class FixtureProvider(ResourceProvider):
    """Serves listings and peeks from a NamespaceSnapshot."""

    def __init__(self, snapshot: NamespaceSnapshot):
        self.snapshot = snapshot

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FixtureProvider":
        """Load a snapshot file.

        Raises:
            ProviderError: If the file is unreadable or does not validate
        """
        path = Path(path)
        try:
            with path.open("r") as f:
                data = json.load(f)
            snapshot = NamespaceSnapshot.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ProviderError(f"load snapshot {path}", str(e), cause=e)
        logger.info(f"Loaded snapshot {path} ({len(snapshot.topics)} topics)")
        return cls(snapshot)

    @property
    def namespace(self) -> str:
        return self.snapshot.namespace

    def list_top_level(self) -> TopLevelListing:
        return TopLevelListing(list(self.snapshot.topics), list(self.snapshot.queues))

    def list_subscriptions(self, topic_name: str) -> List[str]:
        try:
            return list(self.snapshot.topics[topic_name])
        except KeyError:
            raise ProviderError(
                f"list subscriptions for topic {topic_name}", "topic not found"
            ) from None

    def peek_messages(
        self,
        topic_name: str,
        subscription_name: str,
        dead_letter: bool,
        max_count: int,
    ) -> List[Message]:
        try:
            subscription = self.snapshot.topics[topic_name][subscription_name]
        except KeyError:
            raise ProviderError(
                "peek messages", f"subscription {topic_name}/{subscription_name} not found"
            ) from None
        messages = subscription.dlq if dead_letter else subscription.active
        return messages[:max_count]
