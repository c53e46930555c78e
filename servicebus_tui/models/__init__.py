"""Data models for the explorer."""

from .message import Message, PropertyValue, format_property_value
from .tree import NodeKind, TreeNode

__all__ = [
    "Message",
    "NodeKind",
    "PropertyValue",
    "TreeNode",
    "format_property_value",
]
