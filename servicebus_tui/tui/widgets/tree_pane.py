"""Resource tree pane."""

from rich.text import Text
from textual.widgets import Static

from ...core.resource_tree import ResourceTree
from ...models.tree import NodeKind, TreeNode
from ..theme import RenderTheme

EXPANDED_ICON = "⌄"
COLLAPSED_ICON = "›"
QUEUE_ICON = "□"
MESSAGES_ICON = "◉"


def node_icon(node: TreeNode) -> str:
    if node.kind in (NodeKind.TOPIC, NodeKind.SUBSCRIPTION):
        return EXPANDED_ICON if node.expanded else COLLAPSED_ICON
    if node.kind is NodeKind.QUEUE:
        return QUEUE_ICON
    return MESSAGES_ICON


def node_label(node: TreeNode) -> str:
    indent = "  " * node.depth
    if node.kind in (NodeKind.SUBSCRIPTION, NodeKind.MESSAGE_GROUP):
        indent += "  "
    return f"{indent}{node_icon(node)} {node.name}"


def render_tree(tree: ResourceTree, theme: RenderTheme, spinner: str) -> Text:
    """Render the visible slice of the flattened tree."""
    if tree.loading and not tree.loaded:
        return Text.assemble(f"{spinner} ", ("Loading topics and queues...", theme.subtle))

    if tree.error and not tree.roots:
        return Text(f"Error: {tree.error}", style=theme.error_style)

    if not tree.flat:
        return Text("No topics or queues found", style=theme.subtle)

    lines = []
    if tree.error:
        lines.append(Text(f"Error: {tree.error}", style=theme.error_style))

    for index, node in tree.visible_rows():
        line = Text(node_label(node))
        if index == tree.selected:
            line.stylize(theme.selected)
        if node.loading:
            line.append(f" {spinner}")
        lines.append(line)

    return Text("\n").join(lines)


class ResourceTreeView(Static):
    """Left pane: topics, subscriptions and queues."""

    DEFAULT_CSS = """
    ResourceTreeView {
        text-wrap: nowrap;
        text-overflow: ellipsis;
    }
    """

    def __init__(self, theme: RenderTheme, *, id: str = "tree-pane"):
        super().__init__("", id=id)
        self.render_theme = theme

    def show(self, tree: ResourceTree, spinner: str, focused: bool) -> None:
        self.styles.border = ("round", self.render_theme.border_color(focused))
        self.update(render_tree(tree, self.render_theme, spinner))
