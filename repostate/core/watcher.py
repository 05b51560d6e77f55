"""Branch change detection.

The branch watcher reports the checked-out branch once, then again each time
it changes, by watching writes to the git metadata directory. Checkouts,
rebases and merges write to that directory many times in quick succession, so
each burst of events is coalesced and followed by a short settle delay before
git is asked for the branch again.
"""

import logging
import queue
import threading
from collections.abc import Callable

from repostate.domain.entities import Repository, WatcherState
from repostate.domain.exceptions import RepoStateError, WatcherSetupError
from repostate.ports.events import EventSubscription, FileEventSource, SubscriptionClosed

logger = logging.getLogger(__name__)

# How often a blocked loop wakes up to check for cancellation
DEFAULT_POLL_INTERVAL = 0.2


class BranchWatcher:
    """Delivers branch names on a queue as the checked-out branch changes.

    Lifecycle: STARTING -> WATCHING -> STOPPED.

    - start() reads the branch, delivers it, and subscribes to the metadata
      directory. Failures raise WatcherSetupError; the caller decides what to
      do about them.
    - run() reacts to write events until the subscription closes or the stop
      event is set, then releases the subscription.

    Only one value is delivered per distinct branch change, never one per
    filesystem event.

    Example:
        notify: queue.Queue[str] = queue.Queue()
        watcher = BranchWatcher(repo, adapter.get_branch, WatchdogEventSource(), notify)
        thread = watcher.start_in_thread()
        ...
        watcher.stop()
        thread.join()
    """

    def __init__(
        self,
        repo: Repository,
        read_branch: Callable[[], str],
        source: FileEventSource,
        notify: "queue.Queue[str]",
        settle_interval: float = 0.1,
        stop_event: threading.Event | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the watcher.

        Args:
            repo: Repository whose metadata directory is watched.
            read_branch: Callable returning the current branch name.
            source: Filesystem event source to subscribe with.
            notify: Queue receiving branch names. The caller drains it.
            settle_interval: Seconds to wait after a burst before re-reading.
            stop_event: Event the caller sets to cancel. Created if omitted.
            poll_interval: Seconds between cancellation checks while idle.
        """
        self._repo = repo
        self._read_branch = read_branch
        self._source = source
        self._notify = notify
        self._settle_interval = settle_interval
        self._stop_event = stop_event if stop_event is not None else threading.Event()
        self._poll_interval = poll_interval

        self._state = WatcherState.STARTING
        self._subscription: EventSubscription | None = None
        self._branch: str | None = None

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def branch(self) -> str | None:
        """Last delivered branch name, or None before start()."""
        return self._branch

    @property
    def settle_interval(self) -> float:
        return self._settle_interval

    def stop(self) -> None:
        """Request the watch loop to exit."""
        self._stop_event.set()

    def start(self) -> None:
        """Deliver the current branch and subscribe to metadata writes.

        Raises:
            WatcherSetupError: If the branch cannot be read or the metadata
                directory cannot be watched.
        """
        if self._state is not WatcherState.STARTING or self._subscription is not None:
            raise WatcherSetupError("Branch watcher has already been started")

        try:
            branch = self._read_branch()
        except RepoStateError as e:
            self._state = WatcherState.STOPPED
            raise WatcherSetupError(
                f"Could not read the current branch: {e.message}", hint=e.hint
            ) from e

        self._branch = branch
        self._notify.put(branch)

        try:
            self._subscription = self._source.subscribe(self._repo.git_dir)
        except OSError as e:
            self._state = WatcherState.STOPPED
            raise WatcherSetupError(
                f"Could not watch {self._repo.git_dir}: {e}",
                hint="Check that the directory exists and the inotify watch limit is not exhausted",
            ) from e

        self._state = WatcherState.WATCHING
        logger.debug("Watching %s for branch changes (branch=%r)", self._repo.git_dir, branch)

    def run(self) -> None:
        """Run the watch loop in the calling thread until stopped.

        Calls start() first if it has not been called yet.

        Raises:
            WatcherSetupError: If start() fails.
        """
        if self._subscription is None:
            self.start()
        subscription = self._subscription
        if subscription is None:
            raise WatcherSetupError(f"No event subscription for {self._repo.git_dir}")

        try:
            self._loop(subscription)
        finally:
            subscription.close()
            self._state = WatcherState.STOPPED
            logger.debug("Stopped watching %s", self._repo.git_dir)

    def start_in_thread(self) -> threading.Thread:
        """Run setup synchronously, then the watch loop in a daemon thread.

        Returns:
            The started thread. Call stop() and join it to shut down.

        Raises:
            WatcherSetupError: If setup fails (no thread is started).
        """
        self.start()
        thread = threading.Thread(
            target=self.run,
            name=f"branch-watcher:{self._repo.root.name}",
            daemon=True,
        )
        thread.start()
        return thread

    def _loop(self, subscription: EventSubscription) -> None:
        while not self._stop_event.is_set():
            try:
                item = subscription.get(timeout=self._poll_interval)
            except SubscriptionClosed:
                return

            if item is None:
                continue
            if isinstance(item, Exception):
                logger.error("Filesystem watch error on %s: %s", self._repo.git_dir, item)
                continue
            if not item.is_write:
                continue

            self._drain(subscription)
            if self._stop_event.wait(self._settle_interval):
                return
            self._refresh_branch()

    def _drain(self, subscription: EventSubscription) -> int:
        """Discard already-queued events without blocking.

        Returns:
            Number of items discarded.
        """
        drained = 0
        while True:
            try:
                item = subscription.get(timeout=0)
            except SubscriptionClosed:
                # Let the main loop notice the closure after this burst
                break
            if item is None:
                break
            if isinstance(item, Exception):
                logger.error("Filesystem watch error on %s: %s", self._repo.git_dir, item)
            drained += 1
        if drained:
            logger.debug("Coalesced %d queued events", drained)
        return drained

    def _refresh_branch(self) -> None:
        try:
            branch = self._read_branch()
        except RepoStateError as e:
            # Mid-checkout reads can fail; the next write event retries
            logger.error("Could not read the current branch: %s", e.message)
            return

        if branch != self._branch:
            logger.info("Branch changed from %r to %r", self._branch, branch)
            self._branch = branch
            self._notify.put(branch)

