"""Pane widgets rendering core state with Rich."""

from .detail_view import MessageDetailView
from .messages_table import MessageListView
from .tree_pane import ResourceTreeView

__all__ = ["MessageDetailView", "MessageListView", "ResourceTreeView"]
