"""Pytest configuration and shared fixtures."""

import subprocess
from pathlib import Path

import pytest

from repostate.domain.entities import Repository
from tests.helpers.fakes import FakeCommandRunner, FakeEventSource

# ============================================================================
# Environment Isolation
# ============================================================================
# The user's global config and GIT_DEFAULT_UPSTREAM would otherwise leak into
# tests that assert default behaviour.


@pytest.fixture(autouse=True)
def isolate_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch):
    """Point the global config at an empty directory and clear overrides."""
    config_home = tmp_path_factory.mktemp("xdg_config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("GIT_DEFAULT_UPSTREAM", raising=False)
    yield config_home


# ============================================================================
# Git Repository Helpers
# ============================================================================
# These helpers consolidate git setup code to avoid duplication across tests.
# Use these functions in fixtures to create consistent test repositories.


def run_git(path: Path, *args: str) -> str:
    """Run a git command in ``path`` and return its stdout.

    Raises:
        subprocess.CalledProcessError: If the command fails.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=10,
    )
    return result.stdout


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
    branch: str = "main",
) -> None:
    """Initialize a git repository with user configuration.

    Args:
        path: Directory to initialize as a git repository.
        user_name: Git user.name configuration value.
        user_email: Git user.email configuration value.
        branch: Name of the initial branch.
    """
    run_git(path, "init")
    # Independent of init.defaultBranch and of the git version
    run_git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    run_git(path, "config", "user.name", user_name)
    run_git(path, "config", "user.email", user_email)
    run_git(path, "config", "commit.gpgsign", "false")


def git_add_and_commit(path: Path, message: str = "Initial commit") -> None:
    """Stage all files and create a commit."""
    run_git(path, "add", "-A")
    run_git(path, "commit", "-m", message)


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create multiple files in a directory.

    Args:
        path: Base directory for file creation.
        files: Mapping of relative file paths to file contents.
               Parent directories are created automatically.
    """
    for file_path, content in files.items():
        full_path = path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)


def create_git_repo(
    path: Path,
    files: dict[str, str] | None = None,
    commit_message: str = "Initial commit",
) -> Path:
    """Create a git repository, optionally with committed files.

    Returns:
        Path to the repository root.
    """
    path.mkdir(parents=True, exist_ok=True)
    init_git_repo(path)

    if files:
        create_test_files(path, files)
        git_add_and_commit(path, message=commit_message)

    return path


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository on branch ``main`` with one commit.

    Contains ``README.md``, ``src/app.py`` and ``src/util.py``.

    Returns:
        Path to the git repository root (symlink-resolved).
    """
    repo = create_git_repo(
        tmp_path / "test_repo",
        files={
            "README.md": "# Test repo\n",
            "src/app.py": "def main():\n    return 0\n",
            "src/util.py": "def helper():\n    return 1\n",
        },
    )
    return repo.resolve()


# ============================================================================
# Fakes
# ============================================================================


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    """Command runner that answers from canned responses and records calls."""
    return FakeCommandRunner()


@pytest.fixture
def fake_events() -> FakeEventSource:
    """Event source handing out a single scriptable subscription."""
    return FakeEventSource()


@pytest.fixture
def fake_repo(tmp_path: Path) -> Repository:
    """Repository handle for unit tests that never touch the filesystem."""
    root = (tmp_path / "repo").resolve()
    return Repository(root=root, default_upstream="origin/main")
