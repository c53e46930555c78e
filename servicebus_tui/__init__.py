"""Terminal explorer for Azure Service Bus namespaces.

Browse topics, subscriptions and queues as a lazily expanded tree, peek the
active or dead-letter messages of a subscription and inspect a single
message in a detail pane.
"""

__version__ = "0.4.0"
