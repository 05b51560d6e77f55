"""Default upstream resolution.

Works out which remote branch other tools should diff against when the caller
does not name one.
"""

import logging
from pathlib import Path

from repostate.core.git_query import run_git
from repostate.domain.config import UPSTREAM_ENV_VAR, UpstreamConfig
from repostate.ports.commands import CommandRunner

logger = logging.getLogger(__name__)


def resolve_default_upstream(
    runner: CommandRunner,
    root: Path,
    config: UpstreamConfig | None = None,
) -> str:
    """Resolve the default upstream branch ref for a repository.

    Precedence (first match wins):
    1. ``config.override`` if non-empty after trimming. Not verified.
    2. The first of ``config.candidates`` that git lists as a remote branch.
    3. "" with a warning, so the caller knows manual configuration is needed.

    Args:
        runner: Command runner used to query git.
        root: Repository root.
        config: Upstream configuration. Defaults to built-in candidates.

    Returns:
        Upstream ref such as "origin/main", or "" if none could be found.
    """
    if config is None:
        config = UpstreamConfig()

    override = config.override.strip()
    if override:
        logger.debug("Using configured upstream %s", override)
        return override

    candidates = list(config.candidates)
    result = run_git(runner, root, ["branch", "--list", "--remote", *candidates])
    first_line = result.text.split("\n")[0].strip() if result.ok else ""
    if not first_line:
        logger.warning(
            "No upstream branches could be detected from %s. "
            "Set %s to the branch name to use as the default upstream.",
            candidates,
            UPSTREAM_ENV_VAR,
        )
        return ""

    logger.debug("Detected default upstream %s", first_line)
    return first_line
