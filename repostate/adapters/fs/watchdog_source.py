"""Filesystem event adapter built on watchdog.

Implements the FileEventSource port. Each subscription runs its own watchdog
observer thread which pushes translated FileEvents onto a queue that the
branch watcher reads from.
"""

import logging
import os
import queue
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from repostate.domain.entities import FileEvent, FileEventKind
from repostate.ports.events import SubscriptionClosed

logger = logging.getLogger(__name__)

# Seconds to wait for the observer thread on close
OBSERVER_JOIN_TIMEOUT = 2.0

# "closed" is close-after-write on inotify; both mean file content was written
_EVENT_KINDS: dict[str, FileEventKind] = {
    EVENT_TYPE_MODIFIED: FileEventKind.WRITE,
    EVENT_TYPE_CLOSED: FileEventKind.WRITE,
    EVENT_TYPE_CREATED: FileEventKind.CREATE,
    EVENT_TYPE_DELETED: FileEventKind.REMOVE,
    EVENT_TYPE_MOVED: FileEventKind.RENAME,
}


def translate_event(event: FileSystemEvent) -> FileEvent:
    """Convert a watchdog event into a FileEvent."""
    kind = _EVENT_KINDS.get(event.event_type, FileEventKind.OTHER)
    return FileEvent(kind=kind, path=Path(os.fsdecode(event.src_path)))


class _QueueingHandler(FileSystemEventHandler):
    """Pushes every event it receives onto a queue.

    An event that cannot be translated is pushed as the exception instead,
    so the reader sees it rather than the observer thread dying.
    """

    def __init__(self, events: "queue.Queue[FileEvent | Exception]") -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            item: FileEvent | Exception = translate_event(event)
        except (TypeError, ValueError) as e:
            item = e
        self._events.put(item)


class WatchdogSubscription:
    """A live watchdog watch on a single directory.

    Events that could not be translated are handed out as exceptions. If the
    observer thread itself dies, get() reports SubscriptionClosed once the
    queue is empty.
    """

    def __init__(self, path: Path) -> None:
        """Start an observer watching ``path`` non-recursively.

        Raises:
            OSError: If the directory does not exist or cannot be watched.
        """
        if not path.is_dir():
            raise FileNotFoundError(f"Not a directory: {path}")

        self.path = path
        self._events: queue.Queue[FileEvent | Exception] = queue.Queue()
        self._closed = False
        self._observer = Observer()
        self._observer.schedule(_QueueingHandler(self._events), str(path), recursive=False)
        self._observer.start()

    def get(self, timeout: float | None = None) -> FileEvent | Exception | None:
        """Wait for the next event.

        Args:
            timeout: Seconds to wait; None blocks, 0 polls.

        Returns:
            Next FileEvent, or None if none arrived in time.

        Raises:
            SubscriptionClosed: If the subscription was closed or its observer
                thread has died.
        """
        if self._closed:
            raise SubscriptionClosed(str(self.path))
        try:
            if timeout == 0:
                return self._events.get_nowait()
            return self._events.get(timeout=timeout)
        except queue.Empty:
            if not self._observer.is_alive():
                logger.warning("Observer for %s stopped unexpectedly", self.path)
                self._closed = True
                raise SubscriptionClosed(str(self.path)) from None
            return None

    def close(self) -> None:
        """Stop the observer. Safe to call more than once."""
        if self._closed and not self._observer.is_alive():
            return
        self._closed = True
        self._observer.stop()
        if self._observer.is_alive():
            self._observer.join(timeout=OBSERVER_JOIN_TIMEOUT)


class WatchdogEventSource:
    """FileEventSource creating watchdog-backed subscriptions."""

    def subscribe(self, path: Path) -> WatchdogSubscription:
        """Start watching a directory non-recursively.

        Args:
            path: Directory to watch.

        Returns:
            Live subscription. Call close() when done.

        Raises:
            OSError: If the directory cannot be watched.
        """
        return WatchdogSubscription(path)
