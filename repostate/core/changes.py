"""Change-set computation.

Collects the files that differ from a reference point, combining committed
changes since the merge base with modifications not yet committed.
"""

import logging
import os
from pathlib import Path

from repostate.core.git_query import format_git_error, run_git
from repostate.domain.entities import ChangeSet, Repository
from repostate.ports.commands import CommandRunner

logger = logging.getLogger(__name__)


def parse_path_lines(output: str, root: Path) -> set[Path]:
    """Turn newline-separated root-relative paths into absolute paths.

    Blank lines are dropped and entries are trimmed. Entries that cannot be
    turned into a path are skipped.

    Args:
        output: Raw git output, one path per line.
        root: Repository root the paths are relative to.

    Returns:
        Set of absolute, normalized paths.
    """
    paths: set[Path] = set()
    for line in output.split("\n"):
        entry = line.strip()
        if not entry:
            continue
        try:
            paths.add(Path(os.path.abspath(root / entry)))
        except (OSError, ValueError) as e:
            logger.debug("Skipping unusable path %r: %s", entry, e)
    return paths


class ChangeSetComputer:
    """Computes the set of paths changed since a reference.

    Failures never propagate: this is called from best-effort contexts such as
    selective test runners, where partial information beats an exception.
    """

    def __init__(self, repo: Repository, runner: CommandRunner) -> None:
        self._repo = repo
        self._runner = runner

    def get_changed_paths(self, since_ref: str) -> ChangeSet:
        """Get absolute paths changed since ``since_ref``.

        Union of:
        - ``git diff <since_ref>... --name-only``: files changed on this side
          since the merge base with ``since_ref``
        - ``git ls-files --modified``: tracked files with uncommitted edits

        Args:
            since_ref: Any ref git accepts, typically the default upstream.

        Returns:
            Deduplicated absolute paths under the repository root. If a git
            command fails, a warning is logged and the paths collected before
            the failure are returned (possibly none).
        """
        root = self._repo.root
        queries = (
            ["diff", f"{since_ref}...", "--stat", "--name-only"],
            ["ls-files", "--modified"],
        )

        result: set[Path] = set()
        for args in queries:
            completed = run_git(self._runner, root, args)
            if not completed.ok:
                logger.warning(format_git_error(completed, f"Could not list changes since {since_ref!r}"))
                return frozenset(result)
            result |= parse_path_lines(completed.text, root)

        return frozenset(result)
