"""Config domain models for repostate.

Configuration is read from the global config.toml and the process environment
at the application boundary, then passed explicitly into the components that
need it. Nothing below the boundary reads environment variables.
"""

from dataclasses import dataclass, field, fields
from typing import Any

# Environment variable whose trimmed value overrides the computed upstream
UPSTREAM_ENV_VAR = "GIT_DEFAULT_UPSTREAM"

DEFAULT_UPSTREAM_CANDIDATES = ("origin/main", "origin/master")


@dataclass(frozen=True)
class UpstreamConfig:
    """Configuration for default upstream resolution.

    Attributes:
        candidates: Remote branches tried in order when no override is given.
        override: Explicit upstream ref. When non-empty (after trimming) it is
            used as-is without asking git.

    Raises:
        ValueError: If candidates is not a non-empty list of non-blank strings,
            or override is not a string.
    """

    candidates: tuple[str, ...] = DEFAULT_UPSTREAM_CANDIDATES
    override: str = ""

    def __post_init__(self) -> None:
        """Validate upstream config after initialization."""
        if isinstance(self.candidates, str):
            raise ValueError("candidates must be a list of branch names, not a string")
        if not isinstance(self.candidates, (list, tuple)):
            raise ValueError(
                f"candidates must be a list of branch names, got {type(self.candidates).__name__}"
            )
        # TOML arrays arrive as lists
        object.__setattr__(self, "candidates", tuple(self.candidates))
        if not self.candidates:
            raise ValueError("candidates must list at least one remote branch")
        if any(not isinstance(c, str) for c in self.candidates):
            raise ValueError(f"candidates must all be strings, got {self.candidates!r}")
        if any(not c.strip() for c in self.candidates):
            raise ValueError(f"candidates must not contain blank names, got {self.candidates!r}")
        if not isinstance(self.override, str):
            raise ValueError(
                f"override must be a string, got {type(self.override).__name__}"
            )


@dataclass(frozen=True)
class WatcherConfig:
    """Configuration for the branch watcher.

    Attributes:
        settle_interval: Seconds to wait after a burst of metadata writes
            before re-reading the branch (default: 0.1).

    Raises:
        ValueError: If settle_interval is not a number or is negative.
    """

    settle_interval: float = 0.1

    def __post_init__(self) -> None:
        """Validate watcher config after initialization."""
        # bool is an int subclass; `settle_interval = true` is a typo, not 1s
        if isinstance(self.settle_interval, bool) or not isinstance(
            self.settle_interval, (int, float)
        ):
            raise ValueError(
                f"settle_interval must be a number, got {self.settle_interval!r}"
            )
        if self.settle_interval < 0:
            raise ValueError(
                f"settle_interval cannot be negative, got {self.settle_interval}"
            )


@dataclass(frozen=True)
class RepoStateConfig:
    """Complete repostate configuration.

    Attributes:
        upstream: Upstream resolution configuration
        watcher: Branch watcher configuration
    """

    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    watcher: WatcherConfig = field(default_factory=WatcherConfig)

    @staticmethod
    def default() -> "RepoStateConfig":
        """Create a config with all default values."""
        return RepoStateConfig(upstream=UpstreamConfig(), watcher=WatcherConfig())

    @staticmethod
    def from_partial(base: "RepoStateConfig", data: dict[str, Any]) -> "RepoStateConfig":
        """Overlay raw config data onto an existing config.

        Keys missing from ``data`` keep their value from ``base``. Unknown
        sections and keys are ignored.

        Args:
            base: Config providing values for anything not in ``data``.
            data: Parsed TOML data, e.g. ``{"watcher": {"settle_interval": 0.5}}``.

        Returns:
            New validated RepoStateConfig.

        Raises:
            ValueError: If a section is not a table or a value fails validation.
        """
        sections: dict[str, Any] = {}
        for section_field in fields(base):
            current = getattr(base, section_field.name)
            overrides = data.get(section_field.name, {})
            if not isinstance(overrides, dict):
                raise ValueError(f"[{section_field.name}] must be a table")
            known = {f.name for f in fields(current)}
            merged = {f.name: getattr(current, f.name) for f in fields(current)}
            merged.update({k: v for k, v in overrides.items() if k in known})
            try:
                sections[section_field.name] = type(current)(**merged)
            except TypeError as e:
                raise ValueError(f"Invalid [{section_field.name}] section: {e}") from e
        return RepoStateConfig(**sections)
