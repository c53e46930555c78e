"""Main Textual application for servicebus-tui."""

import logging
from typing import Optional

from textual.app import App
from textual.binding import Binding

from ..core.config import ExplorerConfig
from ..providers.base import ResourceProvider
from .screens.explorer import ExplorerScreen

logger = logging.getLogger(__name__)


class ServiceBusExplorerApp(App):
    """Interactive explorer for one Service Bus namespace."""

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+c,q", "quit", "Quit", priority=True),
    ]

    TITLE = "servicebus-tui"

    def __init__(self, provider: ResourceProvider, config: Optional[ExplorerConfig] = None):
        super().__init__()
        self.provider = provider
        self.config = config or ExplorerConfig()

    async def on_mount(self) -> None:
        self.sub_title = self.provider.namespace
        await self.push_screen(ExplorerScreen(self.provider, self.config))

    def on_unmount(self) -> None:
        try:
            self.provider.close()
        except Exception as e:
            logger.warning(f"Failed to close provider: {e}")

    def action_quit(self) -> None:
        self.exit()


def run_app(provider: ResourceProvider, config: Optional[ExplorerConfig] = None) -> None:
    ServiceBusExplorerApp(provider, config).run()
