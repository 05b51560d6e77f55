"""TOML-based configuration provider.

Loads configuration from the global config.toml and the process environment.

Config loading priority (highest to lowest):
1. Environment: GIT_DEFAULT_UPSTREAM (upstream override only)
2. Global: ~/.config/repostate/config.toml (user defaults)
3. Built-in defaults
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import replace

from repostate.domain.config import UPSTREAM_ENV_VAR, RepoStateConfig
from repostate.shared.config_io import get_global_config_path, load_config_data

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML and the environment.

    This is the process boundary: it is the only place that reads environment
    variables. Everything below it receives an explicit RepoStateConfig.

    Gracefully handles missing or invalid configs with warnings.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize the provider.

        Args:
            environ: Environment mapping to read overrides from.
                Defaults to os.environ.
        """
        self._environ = environ if environ is not None else os.environ

    def load(self) -> RepoStateConfig:
        """Load configuration with environment overrides.

        Returns:
            RepoStateConfig instance with merged values or defaults
        """
        config = RepoStateConfig.default()

        global_path = get_global_config_path()
        if global_path.exists():
            try:
                config = RepoStateConfig.from_partial(config, load_config_data(global_path))
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        return apply_environment(config, self._environ)


def apply_environment(config: RepoStateConfig, environ: Mapping[str, str]) -> RepoStateConfig:
    """Apply environment overrides to a config.

    Args:
        config: Config to start from.
        environ: Environment mapping.

    Returns:
        Config with the upstream override taken from GIT_DEFAULT_UPSTREAM when
        that variable is set to a non-blank value.
    """
    override = environ.get(UPSTREAM_ENV_VAR, "").strip()
    if not override:
        return config
    logger.debug("Using upstream %r from %s", override, UPSTREAM_ENV_VAR)
    return replace(config, upstream=replace(config.upstream, override=override))
