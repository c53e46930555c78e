"""Node id grammar.

Ids are ASCII, hyphen separated and names are not escaped:

    topic-<topic>
    queue-<queue>
    sub-<topic>-<subscription>
    sub-<topic>-<subscription>-active
    sub-<topic>-<subscription>-dlq

Message-group ids decode by splitting on the last hyphen, so a hyphen
inside a subscription name shifts the split point. That ambiguity is a
known limitation of the grammar.
"""

from typing import NamedTuple, Optional

from ..errors import NodeIdDecodeError

TOPIC_PREFIX = "topic-"
QUEUE_PREFIX = "queue-"
SUBSCRIPTION_PREFIX = "sub-"
ACTIVE_SUFFIX = "-active"
DEAD_LETTER_SUFFIX = "-dlq"


class MessageGroupRef(NamedTuple):
    """Decoded message-group id."""

    topic_name: str
    subscription_name: str
    dead_letter: bool


def topic_id(topic_name: str) -> str:
    return f"{TOPIC_PREFIX}{topic_name}"


def queue_id(queue_name: str) -> str:
    return f"{QUEUE_PREFIX}{queue_name}"


def subscription_id(topic_name: str, subscription_name: str) -> str:
    return f"{SUBSCRIPTION_PREFIX}{topic_name}-{subscription_name}"


def message_group_id(topic_name: str, subscription_name: str, dead_letter: bool) -> str:
    suffix = DEAD_LETTER_SUFFIX if dead_letter else ACTIVE_SUFFIX
    return f"{subscription_id(topic_name, subscription_name)}{suffix}"


def topic_name_from_id(node_id: str) -> str:
    """Strip the topic prefix from a topic node id."""
    if node_id.startswith(TOPIC_PREFIX):
        return node_id[len(TOPIC_PREFIX):]
    return node_id


def parse_message_group_id(node_id: str) -> MessageGroupRef:
    """Decode a message-group id.

    Raises:
        NodeIdDecodeError: If the id does not follow the grammar
    """
    if not node_id.startswith(SUBSCRIPTION_PREFIX):
        raise NodeIdDecodeError(node_id, "missing 'sub-' prefix")
    remainder = node_id[len(SUBSCRIPTION_PREFIX):]

    if remainder.endswith(ACTIVE_SUFFIX):
        dead_letter = False
        remainder = remainder[: -len(ACTIVE_SUFFIX)]
    elif remainder.endswith(DEAD_LETTER_SUFFIX):
        dead_letter = True
        remainder = remainder[: -len(DEAD_LETTER_SUFFIX)]
    else:
        raise NodeIdDecodeError(node_id, "missing '-active' or '-dlq' suffix")

    topic_name, sep, subscription_name = remainder.rpartition("-")
    if not sep:
        raise NodeIdDecodeError(node_id, "no separator between topic and subscription")

    return MessageGroupRef(topic_name, subscription_name, dead_letter)


def decode_message_group_id(node_id: str) -> Optional[MessageGroupRef]:
    """Decode a message-group id, returning None when it is malformed."""
    try:
        return parse_message_group_id(node_id)
    except NodeIdDecodeError:
        return None
