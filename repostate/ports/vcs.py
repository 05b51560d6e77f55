"""Version Control System (VCS) port interface.

Defines the query surface build and test tooling uses to inspect a git
working tree.
"""

import queue
import threading
from pathlib import Path
from typing import Protocol

from repostate.domain.entities import ChangeSet


class RepositoryState(Protocol):
    """Protocol for live repository state queries (git)."""

    @property
    def root(self) -> Path:
        """Absolute, symlink-resolved repository root."""
        ...

    @property
    def default_upstream(self) -> str:
        """Remote ref used as the default diff baseline, or "" if unknown."""
        ...

    def get_branch(self) -> str:
        """Get the name of the checked-out branch.

        Returns:
            Branch name, or "" when HEAD is detached.

        Raises:
            GitCommandError: If git fails.
        """
        ...

    def get_sha(self) -> str:
        """Get the commit SHA of HEAD. Uncommitted changes are not reflected.

        Raises:
            GitCommandError: If git fails.
        """
        ...

    def get_working_hash(self) -> str:
        """Get a fingerprint of HEAD plus all staged and unstaged changes.

        Raises:
            GitCommandError: If git fails (e.g. no commits yet).
        """
        ...

    def get_changed_paths(self, since_ref: str) -> ChangeSet:
        """Get absolute paths changed since ``since_ref``, including local edits.

        Never raises on git failure; returns what could be collected.
        """
        ...

    def is_tracked(self, path: Path) -> bool:
        """Check if a path is tracked by git or matches an override pattern."""
        ...

    def is_ignored(self, path: Path) -> bool:
        """Check if a path is ignored by git."""
        ...

    def detect_branch_change(
        self,
        notify: "queue.Queue[str]",
        stop_event: threading.Event | None = None,
    ) -> None:
        """Deliver the current branch, then every subsequent branch change.

        Blocks until the event subscription closes or ``stop_event`` is set.

        Raises:
            WatcherSetupError: If the initial branch or subscription fails.
        """
        ...
