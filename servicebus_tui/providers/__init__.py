"""Resource providers consumed by the explorer core."""

from .base import ResourceProvider, TopLevelListing
from .fixture import FixtureProvider

__all__ = ["FixtureProvider", "ResourceProvider", "TopLevelListing"]
