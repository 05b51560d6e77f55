"""Command execution port interface.

Defines the single capability every query component depends on: running an
external command and getting back its combined output and exit status.
Substituting a fake runner lets the components be tested without git.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command invocation.

    Attributes:
        args: Full argument list that was run, including the program name.
        returncode: Exit status (0 on success).
        output: Combined stdout and stderr bytes.
    """

    args: tuple[str, ...]
    returncode: int
    output: bytes = b""

    @property
    def ok(self) -> bool:
        """True if the command exited successfully."""
        return self.returncode == 0

    @property
    def text(self) -> str:
        """Output decoded as UTF-8, undecodable bytes replaced."""
        return self.output.decode("utf-8", errors="replace")


class CommandRunner(Protocol):
    """Protocol for running external version-control commands."""

    def run(self, args: list[str], cwd: Path | None = None) -> CommandResult:
        """Run a command and wait for it to finish.

        Args:
            args: Program name followed by its arguments (e.g. ["git", "status"]).
            cwd: Working directory for the command. Defaults to the current one.

        Returns:
            CommandResult with exit status and combined output.

        Note:
            Implementations report failures (non-zero exit, missing program,
            timeout) through the returned result rather than by raising.
        """
        ...
