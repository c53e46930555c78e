"""Azure Service Bus provider.

Uses the azure-servicebus SDK (install the `azure` extra): the management
client for listings and a subscription receiver for peeks. Authentication
is by connection string only.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..errors import ProviderError
from ..logging_config import log_timing
from ..models.message import Message, PropertyValue
from .base import ResourceProvider, TopLevelListing

logger = logging.getLogger(__name__)


def parse_namespace(connection_string: str) -> str:
    """Extract the namespace name from a connection string endpoint.

    Examples:
        >>> parse_namespace("Endpoint=sb://contoso.servicebus.windows.net/;SharedAccessKeyName=k")
        'contoso'
    """
    for part in connection_string.split(";"):
        part = part.strip()
        if part.lower().startswith("endpoint="):
            endpoint = part[len("endpoint="):]
            if endpoint.startswith("sb://"):
                endpoint = endpoint[len("sb://"):]
            endpoint = endpoint.rstrip("/")
            host, dot, _ = endpoint.partition(".")
            return host if dot and host else endpoint
    return ""


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def coerce_property(value: Any) -> PropertyValue:
    """Map an AMQP application property onto the closed value union."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return _text(value)


def _body_text(message: Any) -> str:
    from azure.servicebus.amqp import AmqpMessageBodyType

    if message.body_type == AmqpMessageBodyType.DATA:
        return b"".join(message.body).decode("utf-8", errors="replace")
    return _text(message.body)


def convert_message(message: Any) -> Message:
    """Build a Message from a peeked ServiceBusReceivedMessage."""
    properties: Dict[str, PropertyValue] = {
        _text(key): coerce_property(value)
        for key, value in (message.application_properties or {}).items()
    }
    enqueued: Optional[datetime] = message.enqueued_time_utc
    return Message(
        sequence_number=message.sequence_number or 0,
        message_id=message.message_id or "",
        subject=message.subject,
        enqueued_time=enqueued,
        content_type=message.content_type,
        body=_body_text(message),
        properties=properties,
    )


class ServiceBusProvider(ResourceProvider):
    """Lists and peeks a Service Bus namespace."""

    def __init__(self, client: Any, admin_client: Any, namespace: str):
        self._client = client
        self._admin = admin_client
        self._namespace = namespace

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "ServiceBusProvider":
        from azure.servicebus import ServiceBusClient
        from azure.servicebus.management import ServiceBusAdministrationClient

        try:
            client = ServiceBusClient.from_connection_string(connection_string)
            admin = ServiceBusAdministrationClient.from_connection_string(connection_string)
        except ValueError as e:
            raise ProviderError("create service bus client", str(e), cause=e)
        return cls(client, admin, parse_namespace(connection_string))

    @property
    def namespace(self) -> str:
        return self._namespace

    def list_top_level(self) -> TopLevelListing:
        from azure.core.exceptions import AzureError

        with log_timing("list topics and queues", logger):
            try:
                topics = [topic.name for topic in self._admin.list_topics()]
            except AzureError as e:
                raise ProviderError("load topics", str(e), cause=e)
            try:
                queues = [queue.name for queue in self._admin.list_queues()]
            except AzureError as e:
                raise ProviderError("load queues", str(e), cause=e)
        return TopLevelListing(topics, queues)

    def list_subscriptions(self, topic_name: str) -> List[str]:
        from azure.core.exceptions import AzureError

        with log_timing(f"list subscriptions for {topic_name}", logger):
            try:
                return [sub.name for sub in self._admin.list_subscriptions(topic_name)]
            except AzureError as e:
                raise ProviderError(f"load subscriptions for {topic_name}", str(e), cause=e)

    def peek_messages(
        self,
        topic_name: str,
        subscription_name: str,
        dead_letter: bool,
        max_count: int,
    ) -> List[Message]:
        from azure.core.exceptions import AzureError
        from azure.servicebus import ServiceBusSubQueue

        sub_queue = ServiceBusSubQueue.DEAD_LETTER if dead_letter else None
        with log_timing(f"peek {topic_name}/{subscription_name}", logger):
            try:
                receiver = self._client.get_subscription_receiver(
                    topic_name=topic_name,
                    subscription_name=subscription_name,
                    sub_queue=sub_queue,
                )
                with receiver:
                    peeked = receiver.peek_messages(max_message_count=max_count)
            except AzureError as e:
                raise ProviderError("peek messages", str(e), cause=e)
        return [convert_message(message) for message in peeked]

    def close(self) -> None:
        self._client.close()
        self._admin.close()
