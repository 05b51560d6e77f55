"""Git adapter implementing the RepositoryState protocol.

Composes the locator, classifier, change-set, fingerprint and watcher
components behind one handle, all sharing a single immutable Repository and
CommandRunner.
"""

import logging
import queue
import threading
from pathlib import Path

from repostate.adapters.git_cmd.runner import SubprocessCommandRunner
from repostate.core.changes import ChangeSetComputer
from repostate.core.fingerprint import WorkingHashComputer
from repostate.core.repo_utils import open_repository
from repostate.core.tracking import TrackedPathClassifier
from repostate.core.watcher import BranchWatcher
from repostate.domain.config import RepoStateConfig
from repostate.domain.entities import ChangeSet, Repository
from repostate.ports.commands import CommandRunner
from repostate.ports.events import FileEventSource

logger = logging.getLogger(__name__)


class GitAdapter:
    """Live view of a git working tree using subprocess calls to git CLI.

    Every query re-derives its answer from git; nothing is cached except the
    fields fixed at construction (root, default upstream, override patterns).
    """

    def __init__(
        self,
        repo: Repository,
        runner: CommandRunner | None = None,
        config: RepoStateConfig | None = None,
        event_source: FileEventSource | None = None,
    ) -> None:
        """Initialize Git adapter.

        Args:
            repo: Repository handle from open_repository().
            runner: Command runner. Defaults to a subprocess runner.
            config: Configuration (used for watcher settings).
            event_source: Filesystem event source for detect_branch_change().
                Defaults to a watchdog source, created on first use.
        """
        self.repo = repo
        self._runner = runner if runner is not None else SubprocessCommandRunner()
        self._config = config if config is not None else RepoStateConfig.default()
        self._event_source = event_source

        self._classifier = TrackedPathClassifier(repo, self._runner)
        self._changes = ChangeSetComputer(repo, self._runner)
        self._hashes = WorkingHashComputer(repo, self._runner)

    @classmethod
    def open(
        cls,
        path_in_repo: Path | None = None,
        config: RepoStateConfig | None = None,
        runner: CommandRunner | None = None,
        event_source: FileEventSource | None = None,
    ) -> "GitAdapter":
        """Locate the repository containing ``path_in_repo`` and wrap it.

        Args:
            path_in_repo: Any path inside the working tree. Defaults to CWD.
            config: Configuration. Defaults to built-in values.
            runner: Command runner. Defaults to a subprocess runner.
            event_source: Filesystem event source for the branch watcher.

        Returns:
            GitAdapter for the discovered repository.

        Raises:
            NotARepositoryError: If no repository root can be found.
        """
        runner = runner if runner is not None else SubprocessCommandRunner()
        repo = open_repository(path_in_repo, runner, config)
        return cls(repo, runner=runner, config=config, event_source=event_source)

    @property
    def root(self) -> Path:
        return self.repo.root

    @property
    def default_upstream(self) -> str:
        return self.repo.default_upstream

    def get_branch(self) -> str:
        return self._hashes.get_branch()

    def get_sha(self) -> str:
        return self._hashes.get_sha()

    def get_working_hash(self) -> str:
        return self._hashes.get_working_hash()

    def get_changed_paths(self, since_ref: str) -> ChangeSet:
        return self._changes.get_changed_paths(since_ref)

    def is_tracked(self, path: Path) -> bool:
        return self._classifier.is_tracked(path)

    def is_ignored(self, path: Path) -> bool:
        return self._classifier.is_ignored(path)

    def branch_watcher(
        self,
        notify: "queue.Queue[str]",
        stop_event: threading.Event | None = None,
    ) -> BranchWatcher:
        """Create a BranchWatcher for this repository (not yet started).

        Args:
            notify: Queue receiving branch names.
            stop_event: Event the caller sets to cancel the watcher.

        Returns:
            Watcher in the STARTING state.
        """
        if self._event_source is None:
            # Deferred so query-only callers never import watchdog
            from repostate.adapters.fs.watchdog_source import WatchdogEventSource

            self._event_source = WatchdogEventSource()

        return BranchWatcher(
            self.repo,
            self.get_branch,
            self._event_source,
            notify,
            settle_interval=self._config.watcher.settle_interval,
            stop_event=stop_event,
        )

    def detect_branch_change(
        self,
        notify: "queue.Queue[str]",
        stop_event: threading.Event | None = None,
    ) -> None:
        """Deliver the current branch, then every change, until stopped.

        Blocks the calling thread. Run it in a thread, or use
        branch_watcher(...).start_in_thread() to get setup errors up front.

        Args:
            notify: Queue receiving branch names.
            stop_event: Event the caller sets to cancel.

        Raises:
            WatcherSetupError: If the initial branch or subscription fails.
        """
        self.branch_watcher(notify, stop_event).run()
