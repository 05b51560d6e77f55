"""Factory functions for adapter instantiation.

Keeps the CLI (and other callers at the process boundary) free from direct
adapter imports, and is the one place where configuration is loaded.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from repostate.adapters.git_cmd.git_adapter import GitAdapter
    from repostate.domain.config import RepoStateConfig
    from repostate.ports.config import ConfigProvider


class ConfigFactory:
    """Factory for creating configuration providers."""

    def create_config_provider(self) -> ConfigProvider:
        """Create the default config provider (global TOML + environment)."""
        from repostate.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()


class RepositoryFactory:
    """Factory for opening repository state adapters.

    Args:
        config: Configuration to use. Loaded from the default provider if omitted.
        command_timeout: Per-command timeout in seconds, or None for no timeout.
    """

    def __init__(
        self,
        config: RepoStateConfig | None = None,
        command_timeout: float | None = None,
    ) -> None:
        if config is None:
            config = ConfigFactory().create_config_provider().load()
        self._config = config
        self._command_timeout = command_timeout

    @property
    def config(self) -> RepoStateConfig:
        return self._config

    def open(self, path_in_repo: Path | None = None) -> GitAdapter:
        """Open the repository containing ``path_in_repo``.

        Raises:
            NotARepositoryError: If no repository root can be found.
        """
        from repostate.adapters.fs.watchdog_source import WatchdogEventSource
        from repostate.adapters.git_cmd.git_adapter import GitAdapter
        from repostate.adapters.git_cmd.runner import SubprocessCommandRunner

        return GitAdapter.open(
            path_in_repo,
            config=self._config,
            runner=SubprocessCommandRunner(timeout=self._command_timeout),
            event_source=WatchdogEventSource(),
        )
