"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from typing import Protocol

from repostate.domain.config import RepoStateConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self) -> RepoStateConfig:
        """Load configuration from files and the process environment.

        Returns:
            RepoStateConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
