"""Domain exceptions for repostate.

These exceptions represent the failures a caller has to act on: no repository
found, a git query that could not be answered, or a branch watcher that could
not be set up. Best-effort queries (change sets, tracked and ignored checks)
never raise them.
"""


class RepoStateError(Exception):
    """Base exception for all repostate errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotARepositoryError(RepoStateError):
    """Raised when no git repository root can be found from a start path."""

    pass


class GitCommandError(RepoStateError, RuntimeError):
    """Raised when a git command needed to answer a query fails.

    Attributes:
        args_: The git arguments that were run.
        returncode: Exit status reported for the command.
        output: Combined stdout/stderr captured from git.
    """

    def __init__(
        self,
        message: str,
        args_: list[str] | None = None,
        returncode: int | None = None,
        output: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.args_ = list(args_ or [])
        self.returncode = returncode
        self.output = output


class WatcherSetupError(RepoStateError):
    """Raised when the branch watcher cannot read the branch or subscribe."""

    pass
