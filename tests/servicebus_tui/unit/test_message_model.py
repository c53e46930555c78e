"""Unit tests for the peeked message model."""

import pytest
from pydantic import ValidationError

from servicebus_tui.models import Message, format_property_value


class TestMessage:

    def test_frozen(self, message_factory):
        message = message_factory(1)
        with pytest.raises(ValidationError):
            message.body = "changed"

    def test_sorted_properties(self, message_factory):
        message = message_factory(1, properties={"b": 1, "a": "x", "c": None})
        assert message.sorted_properties() == [("a", "x"), ("b", 1), ("c", None)]

    def test_property_values_are_closed(self):
        with pytest.raises(ValidationError):
            Message(sequence_number=1, properties={"nested": {"a": 1}})
        with pytest.raises(ValidationError):
            Message(sequence_number=1, properties={"items": [1, 2]})

    def test_property_types_kept_as_given(self):
        message = Message(
            sequence_number=1,
            properties={"flag": True, "count": 3, "ratio": 0.5, "name": "n", "none": None},
        )
        assert message.properties["flag"] is True
        assert type(message.properties["count"]) is int
        assert type(message.properties["ratio"]) is float

    def test_defaults(self):
        message = Message(sequence_number=9)
        assert message.message_id == ""
        assert message.body == ""
        assert message.subject is None
        assert message.properties == {}


class TestFormatPropertyValue:

    @pytest.mark.parametrize("value,expected", [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (42, "42"),
        (2.5, "2.5"),
        ("plain", "plain"),
        ("", ""),
    ])
    def test_formats(self, value, expected):
        assert format_property_value(value) == expected
