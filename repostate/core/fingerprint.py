"""Commit, branch and working-tree fingerprint queries."""

import blake3

from repostate.core.git_query import check_git
from repostate.domain.entities import Repository
from repostate.ports.commands import CommandRunner


class WorkingHashComputer:
    """Answers identity queries about the checked-out state.

    Unlike change sets, these queries are used as cache keys, so a git failure
    is raised rather than papered over.
    """

    def __init__(self, repo: Repository, runner: CommandRunner) -> None:
        self._repo = repo
        self._runner = runner

    def get_branch(self) -> str:
        """Get the current branch name ("" when HEAD is detached).

        Raises:
            GitCommandError: If git fails.
        """
        result = check_git(
            self._runner,
            self._repo.root,
            ["branch", "--show-current"],
            "Failed to read current branch",
        )
        return result.text.strip()

    def get_sha(self) -> str:
        """Get the commit SHA of HEAD.

        This does not reflect uncommitted changes; use get_working_hash() for that.

        Raises:
            GitCommandError: If git fails (e.g. no commits yet).
        """
        result = check_git(
            self._runner,
            self._repo.root,
            ["rev-parse", "HEAD"],
            "Failed to read HEAD commit",
        )
        return result.text.strip()

    def get_working_hash(self) -> str:
        """Get a fingerprint of HEAD plus staged and unstaged changes.

        The blake3 digest is fed the raw ``git diff HEAD`` output followed by
        the raw ``git rev-parse HEAD`` output. A new commit or any edit to a
        tracked file changes the result. Untracked files are not part of
        ``git diff HEAD`` and so do not affect it.

        Returns:
            64-character lowercase hex digest.

        Raises:
            GitCommandError: If either git command fails. No partial hash is
                produced.
        """
        diff = check_git(
            self._runner,
            self._repo.root,
            ["diff", "HEAD"],
            "Failed to diff working tree against HEAD",
        )
        hasher = blake3.blake3()
        hasher.update(diff.output)

        head = check_git(
            self._runner,
            self._repo.root,
            ["rev-parse", "HEAD"],
            "Failed to read HEAD commit",
        )
        hasher.update(head.output)
        return hasher.hexdigest()
