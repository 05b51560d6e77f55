"""Filesystem event port interface.

Defines the subscription the branch watcher reads from. A subscription hands
out FileEvents, surfaced errors, or a closed marker, one item at a time.
"""

from pathlib import Path
from typing import Protocol

from repostate.domain.entities import FileEvent


class SubscriptionClosed(Exception):
    """Raised by a subscription once its event source has shut down."""

    pass


class EventSubscription(Protocol):
    """Protocol for a live subscription to filesystem events on one directory."""

    def get(self, timeout: float | None = None) -> FileEvent | Exception | None:
        """Wait for the next item from the subscription.

        Args:
            timeout: Seconds to wait. None blocks until an item arrives,
                0 polls without blocking.

        Returns:
            The next FileEvent, an Exception surfaced by the event source, or
            None if nothing arrived within the timeout.

        Raises:
            SubscriptionClosed: If the event source has been closed.
        """
        ...

    def close(self) -> None:
        """Stop delivering events and release the underlying resources."""
        ...


class FileEventSource(Protocol):
    """Protocol for creating filesystem event subscriptions."""

    def subscribe(self, path: Path) -> EventSubscription:
        """Start watching a directory (non-recursively).

        Args:
            path: Directory to watch.

        Returns:
            A live EventSubscription.

        Raises:
            OSError: If the directory cannot be watched.
        """
        ...
