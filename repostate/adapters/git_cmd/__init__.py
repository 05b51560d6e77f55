"""Git command-line adapters."""

from .git_adapter import GitAdapter
from .runner import SubprocessCommandRunner

__all__ = ["GitAdapter", "SubprocessCommandRunner"]
