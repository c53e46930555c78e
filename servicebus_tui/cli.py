"""CLI entry point for servicebus-tui.

Commands:
- browse: Interactive three-pane explorer (default)
- tree: Print topics, subscriptions and queues without the TUI

Usage:
    servicebus-tui --connection-string "Endpoint=sb://..."
    servicebus-tui --fixture snapshot.json tree
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.tree import Tree

from .core.config import CONNECTION_STRING_ENV, ExplorerConfig, connection_string_from_env, load_config
from .core.events import FetchFailed, FetchTarget
from .core.fetch import FetchRequest, resolve_fetch_sync
from .errors import ServiceBusTuiError
from .logging_config import default_log_path, setup_logging
from .providers.base import ResourceProvider
from .providers.fixture import FixtureProvider

logger = logging.getLogger(__name__)


class UsageError(ServiceBusTuiError):
    """Command line arguments do not select a provider."""


def build_provider(args: argparse.Namespace) -> ResourceProvider:
    """Pick the snapshot or Service Bus provider from the arguments."""
    if args.fixture:
        return FixtureProvider.from_file(args.fixture)

    connection_string = args.connection_string or connection_string_from_env()
    if not connection_string:
        raise UsageError(
            f"no connection string: pass --connection-string, set {CONNECTION_STRING_ENV}, "
            "or use --fixture"
        )

    from .providers.servicebus import ServiceBusProvider

    try:
        return ServiceBusProvider.from_connection_string(connection_string)
    except ImportError:
        raise UsageError(
            "azure-servicebus is not installed: pip install 'servicebus-tui[azure]'"
        ) from None


def cmd_browse(args: argparse.Namespace, config: ExplorerConfig) -> int:
    """Launch the interactive explorer"""
    from .tui.app import run_app

    provider = build_provider(args)
    run_app(provider, config)
    return 0


def cmd_tree(args: argparse.Namespace, config: ExplorerConfig) -> int:
    """Print the namespace as a tree"""
    console = Console()
    provider = build_provider(args)
    try:
        listing = resolve_fetch_sync(FetchRequest(
            target=FetchTarget.TOP_LEVEL,
            call=provider.list_top_level,
            on_success=lambda result: result,
            description="list topics and queues",
        ))
        if isinstance(listing, FetchFailed):
            console.print(f"[red]Error:[/red] {listing.error}")
            return 1

        root = Tree(f"[bold]{provider.namespace}[/bold]")
        for topic in listing.topics:
            branch = root.add(f"› {topic}")
            subscriptions = resolve_fetch_sync(FetchRequest(
                target=FetchTarget.SUBSCRIPTIONS,
                call=lambda topic=topic: provider.list_subscriptions(topic),
                on_success=lambda result: result,
                key=topic,
                description=f"list subscriptions for {topic}",
            ))
            if isinstance(subscriptions, FetchFailed):
                branch.add(f"[red]Error:[/red] {subscriptions.error}")
                continue
            for subscription in subscriptions:
                branch.add(subscription)
        for queue in listing.queues:
            root.add(f"□ {queue}")

        if not listing.topics and not listing.queues:
            console.print("[dim]No topics or queues found[/dim]")
        else:
            console.print(root)
        return 0
    finally:
        provider.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="servicebus-tui",
        description="Terminal explorer for Azure Service Bus namespaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Browse a namespace
  servicebus-tui --connection-string "Endpoint=sb://contoso.servicebus.windows.net/;..."

  # Connection string from the environment
  export {CONNECTION_STRING_ENV}="Endpoint=sb://..."
  servicebus-tui

  # Offline snapshot
  servicebus-tui --fixture snapshot.json tree
        """
    )

    parser.add_argument(
        '--connection-string',
        type=str,
        default=None,
        help=f'Service Bus connection string (default: ${CONNECTION_STRING_ENV})'
    )
    parser.add_argument(
        '--fixture',
        type=Path,
        default=None,
        help='Read the namespace from a JSON snapshot instead of Service Bus'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to config.json (default: $XDG_CONFIG_HOME/servicebus-tui/config.json)'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Log at INFO level')
    parser.add_argument('--debug', action='store_true', help='Log at DEBUG level')
    parser.add_argument(
        '--log-file',
        type=Path,
        default=None,
        help=f'Log file (default: {default_log_path()})'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    parser_browse = subparsers.add_parser('browse', help='Interactive explorer (TUI)')
    parser_browse.set_defaults(func=cmd_browse)

    parser_tree = subparsers.add_parser('tree', help='Print topics, subscriptions and queues')
    parser_tree.set_defaults(func=cmd_tree)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        args.command = 'browse'
        args.func = cmd_browse

    # The TUI owns the terminal; other commands log to stderr.
    log_file = args.log_file
    if log_file is None and args.command == 'browse':
        log_file = default_log_path()
    setup_logging(verbose=args.verbose, debug=args.debug, log_file=log_file)

    try:
        config = load_config(args.config)
        return args.func(args, config)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except ServiceBusTuiError as e:
        logger.error(e.message)
        if log_file is not None:
            print(f"ERROR: {e.message}", file=sys.stderr)
        return 1
