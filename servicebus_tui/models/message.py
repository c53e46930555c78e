"""
Peeked message model.

Messages are immutable once loaded. Application properties are restricted
to a closed set of value types so formatting and ordering stay
deterministic.
"""

from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

# Closed union for application property values: string, number, bool or null.
PropertyValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class Message(BaseModel):
    """A message returned by a peek operation."""

    model_config = ConfigDict(frozen=True)

    sequence_number: int
    message_id: str = ""
    subject: Optional[str] = None
    enqueued_time: Optional[datetime] = None
    content_type: Optional[str] = None
    body: str = ""
    properties: Dict[str, PropertyValue] = Field(default_factory=dict)

    def sorted_properties(self) -> list[tuple[str, PropertyValue]]:
        """Application properties sorted by key ascending."""
        return sorted(self.properties.items(), key=lambda item: item[0])


def format_property_value(value: PropertyValue) -> str:
    """Format a property value for display.

    Examples:
        >>> format_property_value(True)
        'true'
        >>> format_property_value(None)
        'null'
        >>> format_property_value(3)
        '3'
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return value
