"""Subprocess adapter implementing the CommandRunner protocol."""

import logging
import subprocess
from pathlib import Path

from repostate.ports.commands import CommandResult

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
MISSING_PROGRAM_RETURNCODE = 127


class SubprocessCommandRunner:
    """Runs commands with subprocess, merging stderr into stdout.

    One process is started per call and waited on. Failures of any kind are
    reported through CommandResult.returncode; nothing is raised.
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            timeout: Seconds to wait for each command, or None to wait
                indefinitely. A command that times out is killed and reported
                as failed.
        """
        self.timeout = timeout

    def run(self, args: list[str], cwd: Path | None = None) -> CommandResult:
        """Run a command and wait for it to finish.

        Args:
            args: Program name followed by its arguments.
            cwd: Working directory for the command.

        Returns:
            CommandResult with exit status and combined output.
        """
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
        try:
            proc = subprocess.run(
                args,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
            )
        except OSError as e:
            # Program missing, or the working directory is not usable
            logger.debug("Could not start %s: %s", args[0], e)
            return CommandResult(
                args=tuple(args),
                returncode=MISSING_PROGRAM_RETURNCODE,
                output=str(e).encode("utf-8"),
            )
        except subprocess.TimeoutExpired as e:
            logger.warning("%s timed out after %ss", " ".join(args), self.timeout)
            return CommandResult(args=tuple(args), returncode=-1, output=e.output or b"")

        return CommandResult(args=tuple(args), returncode=proc.returncode, output=proc.stdout)
