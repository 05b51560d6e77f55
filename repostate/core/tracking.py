"""Tracked and ignored path classification."""

import logging
from pathlib import Path

from repostate.core.git_query import run_git
from repostate.domain.entities import Repository
from repostate.ports.commands import CommandRunner

logger = logging.getLogger(__name__)


class TrackedPathClassifier:
    """Decides whether paths are tracked or ignored.

    Tracked-ness combines the repository's override patterns with git's index:
    a path matching an override pattern is tracked even if git has never seen
    it. Ignored-ness is a separate git query that overrides do not affect, so
    a path can be both ignored and tracked.

    Both checks are best-effort: any git failure reads as False.
    """

    def __init__(self, repo: Repository, runner: CommandRunner) -> None:
        self._repo = repo
        self._runner = runner

    def matches_override(self, relative_path: Path) -> bool:
        """Check a root-relative path against the override patterns, in order."""
        text = relative_path.as_posix()
        for pattern in self._repo.override_patterns:
            if pattern.search(text):
                logger.debug("%s matches override pattern %r", text, pattern.pattern)
                return True
        return False

    def is_tracked(self, path: Path) -> bool:
        """Check whether a path should be treated as version-controlled.

        Args:
            path: Absolute path, or path relative to the repository root.

        Returns:
            True if the path matches an override pattern or git knows it.
        """
        relative_path = self._repo.relative(Path(path))
        if relative_path is None:
            logger.warning("%s is not inside %s", path, self._repo.root)
            target = str(path)
        else:
            if self.matches_override(relative_path):
                return True
            target = relative_path.as_posix()

        result = run_git(self._runner, self._repo.root, ["ls-files", "--error-unmatch", target])
        return result.ok

    def is_ignored(self, path: Path) -> bool:
        """Check whether git ignores a path.

        Args:
            path: Absolute path, or path relative to the repository root.

        Returns:
            True if ``git check-ignore`` matches the path.
        """
        result = run_git(self._runner, self._repo.root, ["check-ignore", str(path)])
        return result.ok
