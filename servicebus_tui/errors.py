"""
Error types for the Service Bus explorer.

Provider failures are converted into pane-local messages at the async
boundary (see core.fetch); none of these exceptions reach rendering code.
"""

from typing import Optional


class ServiceBusTuiError(Exception):
    """Base class for all explorer errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderError(ServiceBusTuiError):
    """A listing or peek operation against the messaging service failed."""

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"failed to {operation}: {message}")
        self.operation = operation
        self.cause = cause


class NodeIdDecodeError(ServiceBusTuiError):
    """A message-group node id does not follow the id grammar."""

    def __init__(self, node_id: str, reason: str):
        super().__init__(f"cannot decode node id {node_id!r}: {reason}")
        self.node_id = node_id
        self.reason = reason


class ConfigError(ServiceBusTuiError):
    """The configuration file could not be read or validated."""
