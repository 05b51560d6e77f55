"""repostate CLI entrypoint.

Command-line interface for querying the state of a git working tree.
"""

from __future__ import annotations

import functools
import logging
import queue
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from repostate.adapters.git_cmd.git_adapter import GitAdapter
    from repostate.domain.config import RepoStateConfig

from repostate.core.errors import RepoStateCliError, no_upstream_error
from repostate.domain.exceptions import RepoStateError
from repostate.version import __version__

# Seconds between checks of the watcher thread while waiting for branches
WATCH_POLL_INTERVAL = 0.5


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors are converted to RepoStateCliError with their hint.
    Anything unexpected gets a generic message, with a traceback in verbose
    mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (RepoStateCliError, click.exceptions.Exit):
                raise
            except RepoStateError as e:
                raise RepoStateCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise RepoStateCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_config() -> RepoStateConfig:
    from repostate.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load()


def _resolve_path_arg(ctx: click.Context, path: Path) -> Path:
    """Resolve a PATH argument against --repo when one was given, else CWD."""
    if path.is_absolute():
        return path
    base = ctx.obj.get("repo")
    if base is None:
        return path.absolute()
    base = base if base.is_dir() else base.parent
    return base.absolute() / path


def _open_repo(ctx: click.Context) -> GitAdapter:
    """Open the repository selected by --repo (default: CWD)."""
    from repostate.adapters.factory import RepositoryFactory

    factory = RepositoryFactory(config=_load_config())
    return factory.open(ctx.obj.get("repo"))


@click.group()
@click.version_option(version=__version__, prog_name="repostate")
@click.option(
    "--repo",
    "-C",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path inside the repository (default: current directory).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress warnings.",
)
@click.pass_context
def cli(ctx: click.Context, repo: Path | None, verbose: bool, quiet: bool) -> None:
    """repostate - Live view of a git working tree for build and test tools."""
    ctx.ensure_object(dict)
    ctx.obj["repo"] = repo
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose, quiet)


@cli.command()
@click.pass_context
@handle_cli_errors("root")
def root(ctx: click.Context) -> None:
    """Print the repository root."""
    click.echo(_open_repo(ctx).root)


@cli.command()
@click.pass_context
@handle_cli_errors("branch")
def branch(ctx: click.Context) -> None:
    """Print the current branch (empty when HEAD is detached)."""
    click.echo(_open_repo(ctx).get_branch())


@cli.command()
@click.pass_context
@handle_cli_errors("sha")
def sha(ctx: click.Context) -> None:
    """Print the commit SHA of HEAD."""
    click.echo(_open_repo(ctx).get_sha())


@cli.command()
@click.pass_context
@handle_cli_errors("upstream")
def upstream(ctx: click.Context) -> None:
    """Print the default upstream branch."""
    adapter = _open_repo(ctx)
    if not adapter.default_upstream:
        no_upstream_error()
    click.echo(adapter.default_upstream)


@cli.command(name="hash")
@click.pass_context
@handle_cli_errors("hash")
def working_hash(ctx: click.Context) -> None:
    """Print a fingerprint of HEAD plus uncommitted changes."""
    click.echo(_open_repo(ctx).get_working_hash())


@cli.command()
@click.option(
    "--since",
    "since_ref",
    default=None,
    help="Ref to compare against (default: the default upstream).",
)
@click.pass_context
@handle_cli_errors("changed")
def changed(ctx: click.Context, since_ref: str | None) -> None:
    """List files changed since a ref, including uncommitted edits."""
    adapter = _open_repo(ctx)
    since_ref = since_ref or adapter.default_upstream
    if not since_ref:
        no_upstream_error()
    for path in sorted(adapter.get_changed_paths(since_ref)):
        click.echo(path)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_context
@handle_cli_errors("tracked")
def tracked(ctx: click.Context, path: Path) -> None:
    """Exit 0 if PATH is tracked (or matches ._treat_as_tracked), else 1.

    A relative PATH is taken relative to --repo when given, else the CWD.
    """
    is_tracked = _open_repo(ctx).is_tracked(_resolve_path_arg(ctx, path))
    if not ctx.obj.get("quiet", False):
        click.echo("tracked" if is_tracked else "untracked")
    ctx.exit(0 if is_tracked else 1)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_context
@handle_cli_errors("ignored")
def ignored(ctx: click.Context, path: Path) -> None:
    """Exit 0 if git ignores PATH, else 1.

    A relative PATH is taken relative to --repo when given, else the CWD.
    """
    is_ignored = _open_repo(ctx).is_ignored(_resolve_path_arg(ctx, path))
    if not ctx.obj.get("quiet", False):
        click.echo("ignored" if is_ignored else "not ignored")
    ctx.exit(0 if is_ignored else 1)


@cli.command()
@click.pass_context
@handle_cli_errors("watch")
def watch(ctx: click.Context) -> None:
    """Print the current branch, then each branch change, until interrupted."""
    adapter = _open_repo(ctx)
    notify: queue.Queue[str] = queue.Queue()
    watcher = adapter.branch_watcher(notify)
    thread = watcher.start_in_thread()

    try:
        while thread.is_alive() or not notify.empty():
            try:
                click.echo(notify.get(timeout=WATCH_POLL_INTERVAL))
            except queue.Empty:
                continue
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        thread.join()


@cli.group()
def config() -> None:
    """Show and manage repostate configuration."""
    pass


@config.command(name="show")
@handle_cli_errors("config show")
def config_show() -> None:
    """Print the effective configuration as TOML."""
    from repostate.shared.config_io import dump_config

    click.echo(dump_config(_load_config()), nl=False)


@config.command(name="path")
@handle_cli_errors("config path")
def config_path() -> None:
    """Print the global config file path."""
    from repostate.shared.config_io import get_global_config_path

    click.echo(get_global_config_path())


@config.command(name="init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file.")
@handle_cli_errors("config init")
def config_init(force: bool) -> None:
    """Write a global config file with default values."""
    from repostate.domain.config import RepoStateConfig
    from repostate.shared.config_io import get_global_config_path, save_config

    path = get_global_config_path()
    if path.exists() and not force:
        raise RepoStateCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    save_config(RepoStateConfig.default(), path)
    click.echo(f"✓ Wrote {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
