"""Message detail pane: the line buffer shown for the highlighted message."""

from enum import Enum
from typing import List, NamedTuple, Optional

from ..models.message import Message, format_property_value
from .text import PLACEHOLDER, format_timestamp, pretty_body

LABEL_WIDTH = 15
SEPARATOR_WIDTH = 20


class LineKind(Enum):
    HEADING = "heading"
    SEPARATOR = "separator"
    FIELD = "field"
    BLANK = "blank"
    BODY = "body"


class DetailLine(NamedTuple):
    """One line of the detail buffer.

    Field lines carry a label and a value; body lines note whether they
    belong to a pretty-printed JSON document.
    """

    kind: LineKind
    text: str = ""
    label: str = ""
    is_json: bool = False

    @property
    def plain(self) -> str:
        if self.kind is LineKind.FIELD:
            return f"{(self.label + ':').ljust(LABEL_WIDTH)} {self.text}"
        if self.kind is LineKind.SEPARATOR:
            return "─" * SEPARATOR_WIDTH
        return self.text


def _field(label: str, value: Optional[str]) -> DetailLine:
    return DetailLine(LineKind.FIELD, value if value else PLACEHOLDER, label=label)


def _section(title: str) -> List[DetailLine]:
    return [DetailLine(LineKind.HEADING, title), DetailLine(LineKind.SEPARATOR)]


def build_lines(message: Message) -> List[DetailLine]:
    """Header fields, then sorted custom properties, then the body."""
    lines = _section("Properties")
    lines.extend([
        _field("Message ID", message.message_id),
        _field("Sequence #", str(message.sequence_number)),
        _field("Subject", message.subject),
        _field("Enqueued", format_timestamp(message.enqueued_time)),
        _field("Content-Type", message.content_type),
    ])

    properties = message.sorted_properties()
    if properties:
        lines.append(DetailLine(LineKind.BLANK))
        lines.extend(_section("Custom Properties"))
        lines.extend(_field(key, format_property_value(value)) for key, value in properties)

    lines.append(DetailLine(LineKind.BLANK))
    lines.extend(_section("Body"))
    body, is_json = pretty_body(message.body)
    lines.extend(
        DetailLine(LineKind.BODY, text, is_json=is_json)
        for text in (body.splitlines() or [PLACEHOLDER])
    )
    return lines


class DetailPane:
    """Rendered view of one message.

    The line buffer is rebuilt whenever a message is set; scrolling it is
    left to the scroll container that displays it.
    """

    def __init__(self):
        self.message: Optional[Message] = None
        self.lines: List[DetailLine] = []

    def set_message(self, message: Optional[Message]) -> None:
        self.message = message
        self.lines = build_lines(message) if message is not None else []
