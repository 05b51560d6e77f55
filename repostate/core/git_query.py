"""Helpers for running git commands against a repository.

Every query component goes through these helpers so that commands always run
from the repository root and failures are reported the same way.
"""

from pathlib import Path

from repostate.domain.exceptions import GitCommandError
from repostate.ports.commands import CommandResult, CommandRunner

GIT = "git"


def run_git(runner: CommandRunner, root: Path, args: list[str]) -> CommandResult:
    """Run a git command with the repository root as working directory.

    Args:
        runner: Command runner to use.
        root: Repository root.
        args: Git arguments (without the 'git' prefix).

    Returns:
        CommandResult from the runner. Failures are not raised.
    """
    return runner.run([GIT, *args], cwd=root)


def format_git_error(result: CommandResult, context: str) -> str:
    """Format a failed git command with full context.

    Args:
        result: The failed command result.
        context: Human-readable description of what was being done.

    Returns:
        Formatted error message with exit code and git's output.
    """
    output = result.text.strip()

    msg = f"{context} (git exit code {result.returncode})"
    if output:
        msg += f": {output}"
    else:
        msg += " (no error output from git)"

    return msg


def check_git(
    runner: CommandRunner,
    root: Path,
    args: list[str],
    context: str,
) -> CommandResult:
    """Run a git command, raising if it fails.

    Args:
        runner: Command runner to use.
        root: Repository root.
        args: Git arguments (without the 'git' prefix).
        context: Description of the operation, used in the error message.

    Returns:
        The successful CommandResult.

    Raises:
        GitCommandError: If git exits non-zero or cannot be run.
    """
    result = run_git(runner, root, args)
    if not result.ok:
        raise GitCommandError(
            format_git_error(result, context),
            args_=args,
            returncode=result.returncode,
            output=result.text,
        )
    return result
