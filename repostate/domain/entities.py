"""Domain entities and value objects.

Core domain models describing a git working tree and the events observed on it.
These are pure Python dataclasses with no dependencies on infrastructure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Name of the git metadata marker found at every repository root
GIT_DIR_NAME = ".git"

# Config file at the repository root listing regexes of paths treated as tracked
TREAT_AS_TRACKED_FILENAME = "._treat_as_tracked"

# A set of absolute file paths produced fresh by every change-set query
ChangeSet = frozenset[Path]


@dataclass(frozen=True)
class Repository:
    """Handle on a discovered git repository.

    Built once by the repository locator and shared by every query component.
    All fields are fixed for the lifetime of the object, so a Repository can be
    read from several threads without locking.

    Attributes:
        root: Absolute, symlink-resolved directory containing ``.git``.
        default_upstream: Remote-tracking ref used as a diff baseline, or "".
        override_patterns: Compiled regexes matched against root-relative paths.
            A match makes a path count as tracked regardless of git's index.
    """

    root: Path
    default_upstream: str = ""
    override_patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate repository fields after initialization."""
        if not self.root.is_absolute():
            raise ValueError(f"Repository root must be absolute, got {self.root}")

    @property
    def git_dir(self) -> Path:
        """Path of the git metadata directory watched for branch changes."""
        return self.root / GIT_DIR_NAME

    def relative(self, path: Path) -> Path | None:
        """Express ``path`` relative to the repository root.

        Args:
            path: Absolute path, or a path relative to the root.

        Returns:
            Root-relative path, or None if the path lies outside the root.
        """
        candidate = path if path.is_absolute() else self.root / path
        try:
            return candidate.relative_to(self.root)
        except ValueError:
            return None


class FileEventKind(str, Enum):
    """Kind of a filesystem event seen on the git metadata directory.

    Only WRITE events can signal a branch change; the rest are ignored by the
    branch watcher.
    """

    WRITE = "write"
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    OTHER = "other"


@dataclass(frozen=True)
class FileEvent:
    """A single filesystem event delivered by an event subscription.

    Attributes:
        kind: What happened to the path.
        path: Path the event refers to.
    """

    kind: FileEventKind
    path: Path

    @property
    def is_write(self) -> bool:
        return self.kind is FileEventKind.WRITE


class WatcherState(str, Enum):
    """Lifecycle of a branch watcher.

    - STARTING: reading the initial branch and subscribing to events
    - WATCHING: reacting to writes on the git metadata directory
    - STOPPED: subscription closed or cancellation requested
    """

    STARTING = "starting"
    WATCHING = "watching"
    STOPPED = "stopped"
