"""Resource tree node model.

Nodes own their children exclusively and keep no back-pointer to their
parent; lookups after asynchronous completions search root-down by id.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List


class NodeKind(Enum):
    """Kind of resource a tree node stands for."""

    TOPIC = "topic"
    QUEUE = "queue"
    SUBSCRIPTION = "subscription"
    MESSAGE_GROUP = "messages"


@dataclass
class TreeNode:
    """A single node of the resource tree.

    Attributes:
        id: Stable id derived from resource names and ancestry (see core.node_ids)
        name: Display name
        kind: Resource kind
        children: Ordered child nodes, owned by this node
        expanded: Whether the children are part of the flattened list
        loading: Whether a child fetch is outstanding
        has_children: Whether this node may ever hold children
        depth: Nesting level, 0 for topics and queues
    """

    id: str
    name: str
    kind: NodeKind
    children: List["TreeNode"] = field(default_factory=list)
    expanded: bool = False
    loading: bool = False
    has_children: bool = False
    depth: int = 0

    def attach_children(self, children: List["TreeNode"]) -> None:
        """Attach children and renumber their depths below this node.

        Leaf nodes never acquire children.
        """
        if not self.has_children:
            return
        self.children = children
        for child in children:
            child.set_depth(self.depth + 1)

    def set_depth(self, depth: int) -> None:
        """Set this node's depth and cascade to the whole subtree."""
        self.depth = depth
        for child in self.children:
            child.set_depth(depth + 1)

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()
