"""Lazily expanded resource tree.

Owns the node hierarchy, the per-topic subscription cache, the flattened
navigation list derived from it, and cursor/scroll state. Subscription
fetches complete asynchronously; their results locate the target topic by
id because a reload may have replaced the node objects in the meantime.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..models.tree import NodeKind, TreeNode
from ..providers.base import ResourceProvider, TopLevelListing
from . import node_ids
from .cache import SubscriptionCache
from .events import Event, FetchTarget, MessageGroupSelected, SubscriptionsLoaded, TopLevelLoaded
from .fetch import FetchDispatcher, FetchRequest

logger = logging.getLogger(__name__)

ACTIVE_GROUP_NAME = "Active Messages"
DEAD_LETTER_GROUP_NAME = "DLQ Messages"

UP_KEYS = ("up", "k")
DOWN_KEYS = ("down", "j")
EXPAND_KEYS = ("right", "l", "enter")
COLLAPSE_KEYS = ("left", "h")
RELOAD_KEYS = ("ctrl+r",)


def build_top_level_nodes(topics: Sequence[str], queues: Sequence[str]) -> List[TreeNode]:
    """Topic nodes first, then queue nodes, both in provider order."""
    nodes = [
        TreeNode(
            id=node_ids.topic_id(name),
            name=name,
            kind=NodeKind.TOPIC,
            has_children=True,
        )
        for name in topics
    ]
    nodes.extend(
        TreeNode(id=node_ids.queue_id(name), name=name, kind=NodeKind.QUEUE)
        for name in queues
    )
    return nodes


def build_subscription_nodes(topic_name: str, subscriptions: Sequence[str]) -> List[TreeNode]:
    """Subscription nodes with their active and dead-letter groups attached."""
    nodes = []
    for name in subscriptions:
        sub = TreeNode(
            id=node_ids.subscription_id(topic_name, name),
            name=name,
            kind=NodeKind.SUBSCRIPTION,
            has_children=True,
            depth=1,
        )
        sub.attach_children([
            TreeNode(
                id=node_ids.message_group_id(topic_name, name, dead_letter=False),
                name=ACTIVE_GROUP_NAME,
                kind=NodeKind.MESSAGE_GROUP,
            ),
            TreeNode(
                id=node_ids.message_group_id(topic_name, name, dead_letter=True),
                name=DEAD_LETTER_GROUP_NAME,
                kind=NodeKind.MESSAGE_GROUP,
            ),
        ])
        nodes.append(sub)
    return nodes


def flatten(roots: Sequence[TreeNode]) -> List[TreeNode]:
    """Pre-order walk that only descends into expanded nodes."""
    flat: List[TreeNode] = []

    def visit(node: TreeNode) -> None:
        flat.append(node)
        if node.expanded:
            for child in node.children:
                visit(child)

    for root in roots:
        visit(root)
    return flat


class ResourceTree:
    """Topics, queues and subscriptions of one namespace.

    Attributes:
        roots: Top-level topic and queue nodes
        flat: Render and navigation order of the visible nodes
        selected: Cursor index into flat, clamped to [0, len(flat) - 1]
        offset: First flat index shown in the viewport
        visible_height: Number of rows the viewport can show
        loading: Whether the top-level listing is outstanding
        loaded: Whether a top-level listing has ever succeeded
        error: Last failure text, shown inline
    """

    def __init__(
        self,
        provider: ResourceProvider,
        dispatcher: FetchDispatcher,
        cache: Optional[SubscriptionCache] = None,
    ):
        self.provider = provider
        self.dispatcher = dispatcher
        self.cache = cache if cache is not None else SubscriptionCache()
        self.roots: List[TreeNode] = []
        self.flat: List[TreeNode] = []
        self.selected = 0
        self.offset = 0
        self.visible_height = 0
        self.loading = False
        self.loaded = False
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Top-level listing
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Fetch topics and queues in the background."""
        self.loading = True
        self.error = None
        self.dispatcher.submit(FetchRequest(
            target=FetchTarget.TOP_LEVEL,
            call=self.provider.list_top_level,
            on_success=_top_level_event,
            description="list topics and queues",
        ))

    def apply_top_level(self, event: TopLevelLoaded) -> None:
        self.roots = build_top_level_nodes(event.topics, event.queues)
        self.loading = False
        self.loaded = True
        self.error = None
        self.selected = 0
        self.offset = 0
        self.rebuild()
        logger.info(f"Loaded {len(event.topics)} topics and {len(event.queues)} queues")

    def apply_top_level_failure(self, error: str) -> None:
        """Leave the tree empty rather than partially populated."""
        self.roots = []
        self.loading = False
        self.error = error
        self.selected = 0
        self.offset = 0
        self.rebuild()

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def expand(self, node: TreeNode) -> None:
        if not node.has_children or node.expanded:
            return

        node.expanded = True

        if node.kind is NodeKind.TOPIC and not node.children:
            cached = self.cache.get(node.id)
            if cached is not None:
                node.attach_children(cached)
            elif not node.loading:
                node.loading = True
                self._request_subscriptions(node.id)

        self.rebuild()

    def _request_subscriptions(self, topic_id: str) -> None:
        topic_name = node_ids.topic_name_from_id(topic_id)

        def on_success(names: Sequence[str]) -> SubscriptionsLoaded:
            return SubscriptionsLoaded(topic_id=topic_id, subscriptions=tuple(names))

        self.dispatcher.submit(FetchRequest(
            target=FetchTarget.SUBSCRIPTIONS,
            call=lambda: self.provider.list_subscriptions(topic_name),
            on_success=on_success,
            key=topic_id,
            description=f"list subscriptions for {topic_name}",
        ))

    def apply_subscriptions(self, event: SubscriptionsLoaded) -> None:
        topic_name = node_ids.topic_name_from_id(event.topic_id)
        subscriptions = self.cache.put(
            event.topic_id,
            build_subscription_nodes(topic_name, event.subscriptions),
        )

        node = self.find_node(event.topic_id)
        if node is None:
            logger.debug(f"Dropping subscriptions for vanished node {event.topic_id}")
            return

        if not node.children:
            node.attach_children(subscriptions)
        node.loading = False
        self.error = None
        self.rebuild()

    def apply_subscriptions_failure(self, topic_id: Optional[str], error: str) -> None:
        """Record the error and fold the topic back so Expand can be retried."""
        self.error = error
        node = self.find_node(topic_id) if topic_id else None
        if node is not None:
            node.loading = False
            if not node.children:
                node.expanded = False
        self.rebuild()

    def collapse(self, node: TreeNode) -> None:
        """Hide children without discarding them."""
        if not node.expanded:
            return
        node.expanded = False
        self.rebuild()

    def rebuild(self) -> None:
        """Recompute the flattened list and keep the cursor in range."""
        self.flat = flatten(self.roots)
        self._clamp()
        self._follow()

    def find_node(self, node_id: str) -> Optional[TreeNode]:
        for root in self.roots:
            for node in root.walk():
                if node.id == node_id:
                    return node
        return None

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def selected_node(self) -> Optional[TreeNode]:
        if 0 <= self.selected < len(self.flat):
            return self.flat[self.selected]
        return None

    def navigate(self, delta: int) -> None:
        """Move the cursor; moving past either end is a no-op."""
        target = self.selected + delta
        if 0 <= target < len(self.flat):
            self.selected = target
        self._follow()

    def set_visible_height(self, height: int) -> None:
        self.visible_height = max(height, 0)
        self._follow()

    @property
    def row_capacity(self) -> int:
        """Rows available to nodes; an inline error line takes one."""
        if self.error and self.roots and self.visible_height > 1:
            return self.visible_height - 1
        return self.visible_height

    def visible_rows(self) -> List[Tuple[int, TreeNode]]:
        """Flat indexes and nodes inside the viewport."""
        capacity = self.row_capacity
        if self.visible_height <= 0 or len(self.flat) <= capacity:
            return list(enumerate(self.flat))
        end = min(self.offset + capacity, len(self.flat))
        return [(i, self.flat[i]) for i in range(self.offset, end)]

    def _clamp(self) -> None:
        if self.selected >= len(self.flat):
            self.selected = len(self.flat) - 1
        if self.selected < 0:
            self.selected = 0

    def _follow(self) -> None:
        if self.visible_height <= 0:
            return
        capacity = self.row_capacity
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + capacity:
            self.offset = self.selected - capacity + 1
        self.offset = max(0, min(self.offset, max(len(self.flat) - capacity, 0)))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_message_group(self, node: TreeNode) -> Optional[MessageGroupSelected]:
        if node.kind is not NodeKind.MESSAGE_GROUP:
            return None
        ref = node_ids.decode_message_group_id(node.id)
        if ref is None:
            logger.debug(f"Ignoring undecodable message group id {node.id}")
            return None
        return MessageGroupSelected(
            topic_name=ref.topic_name,
            subscription_name=ref.subscription_name,
            dead_letter=ref.dead_letter,
        )

    def activate_selected(self) -> Optional[Event]:
        """Expand the selected node, or select it if it is a message group."""
        node = self.selected_node
        if node is None:
            return None
        if node.kind is NodeKind.MESSAGE_GROUP:
            return self.select_message_group(node)
        self.expand(node)
        return None

    def dismiss_error(self) -> None:
        """Clear an inline subscription error once the user moves on.

        A top-level failure stays, since the tree has nothing else to show.
        """
        if self.error and self.roots:
            self.error = None
            self._follow()

    def handle_key(self, key: str) -> Optional[Event]:
        self.dismiss_error()
        if key in UP_KEYS:
            self.navigate(-1)
        elif key in DOWN_KEYS:
            self.navigate(1)
        elif key in EXPAND_KEYS:
            return self.activate_selected()
        elif key in COLLAPSE_KEYS:
            node = self.selected_node
            if node is not None:
                self.collapse(node)
        elif key in RELOAD_KEYS and not self.loading:
            self.load()
        return None

    @property
    def any_loading(self) -> bool:
        return self.loading or any(node.loading for node in self.flat)


def _top_level_event(listing: TopLevelListing) -> TopLevelLoaded:
    topics, queues = listing
    return TopLevelLoaded(topics=tuple(topics), queues=tuple(queues))
