"""Repository discovery utilities.

Functions for finding the git repository root from any path inside it and
building the Repository handle the query components share.
"""

import logging
import re
from pathlib import Path

from repostate.core.upstream import resolve_default_upstream
from repostate.domain.config import RepoStateConfig
from repostate.domain.entities import GIT_DIR_NAME, TREAT_AS_TRACKED_FILENAME, Repository
from repostate.domain.exceptions import NotARepositoryError
from repostate.ports.commands import CommandRunner

logger = logging.getLogger(__name__)


def find_git_root(start_path: Path | None = None) -> Path:
    """Find the git repository root by walking up directories.

    Resolves symlinks in ``start_path`` first, then searches for a ``.git``
    entry (directory, or file for worktrees and submodules) in it and each
    parent up to the filesystem root.

    Args:
        start_path: File or directory to start searching from. Defaults to CWD.

    Returns:
        Absolute, symlink-resolved path of the directory containing ``.git``.

    Raises:
        NotARepositoryError: If the start path cannot be resolved or no
            parent contains ``.git``.
    """
    if start_path is None:
        start_path = Path.cwd()

    try:
        current = Path(start_path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        # RuntimeError is raised for symlink loops on older interpreters
        raise NotARepositoryError(
            f"Cannot resolve {start_path}: {e}",
            hint="Check that the path exists and is readable",
        ) from e

    while True:
        if (current / GIT_DIR_NAME).exists():
            try:
                return current.resolve(strict=True)
            except (OSError, RuntimeError) as e:
                raise NotARepositoryError(f"Cannot resolve {current}: {e}") from e

        parent = current.parent
        if parent == current:
            # Reached filesystem root without finding .git
            raise NotARepositoryError(
                f"No git project root was found, starting at {start_path}",
                hint="Run from inside a git working tree",
            )

        current = parent


def load_override_patterns(root: Path) -> tuple[re.Pattern[str], ...]:
    """Load the regexes of paths that should be treated as tracked.

    Reads ``._treat_as_tracked`` at the repository root, one regex per line.
    Blank lines are skipped; lines that fail to compile are logged and dropped.
    A missing or unreadable file yields no patterns.

    Args:
        root: Repository root.

    Returns:
        Compiled patterns in file order.
    """
    config_path = root / TREAT_AS_TRACKED_FILENAME
    try:
        content = config_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ()

    patterns: list[re.Pattern[str]] = []
    for line in content.split("\n"):
        # Tolerate CRLF files
        line = line.rstrip("\r")
        if not line:
            continue
        try:
            patterns.append(re.compile(line))
        except re.error as e:
            logger.warning("Could not compile %r in %s: %s", line, config_path, e)
            continue
        logger.debug("Treating files matching regex %r as though they are tracked", line)

    return tuple(patterns)


def open_repository(
    start_path: Path | None,
    runner: CommandRunner,
    config: RepoStateConfig | None = None,
) -> Repository:
    """Locate the repository containing ``start_path`` and build its handle.

    Finds the root, resolves the default upstream once, and loads override
    patterns. Nothing is written.

    Args:
        start_path: Any path inside the repository. Defaults to CWD.
        runner: Command runner used for the upstream query.
        config: Configuration. Defaults to built-in values.

    Returns:
        Fully populated Repository.

    Raises:
        NotARepositoryError: If no repository root can be found.
    """
    if config is None:
        config = RepoStateConfig.default()

    root = find_git_root(start_path)
    default_upstream = resolve_default_upstream(runner, root, config.upstream)
    override_patterns = load_override_patterns(root)
    logger.debug(
        "Opened repository at %s (upstream=%r, %d override patterns)",
        root,
        default_upstream,
        len(override_patterns),
    )
    return Repository(
        root=root,
        default_upstream=default_upstream,
        override_patterns=override_patterns,
    )
