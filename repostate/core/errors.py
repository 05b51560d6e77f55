"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all repostate CLI commands.
"""

from typing import NoReturn

import click


class RepoStateCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise RepoStateCliError(
            "No default upstream could be found",
            hint="Pass --since or set GIT_DEFAULT_UPSTREAM",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def no_upstream_error() -> NoReturn:
    """Raise error when no baseline ref is available for a change set.

    Raises:
        RepoStateCliError: Always raises with configuration hint.
    """
    raise RepoStateCliError(
        "No default upstream branch could be detected",
        hint="Pass --since REF, or set GIT_DEFAULT_UPSTREAM (e.g. origin/main)",
    )
