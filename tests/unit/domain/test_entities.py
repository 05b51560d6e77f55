"""Unit tests for domain entities."""

import re
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from repostate.domain.entities import (
    FileEvent,
    FileEventKind,
    Repository,
    WatcherState,
)


class TestRepository:
    """Tests for the Repository handle."""

    def test_git_dir_is_under_root(self, tmp_path: Path):
        repo = Repository(root=tmp_path)
        assert repo.git_dir == tmp_path / ".git"

    def test_defaults(self, tmp_path: Path):
        repo = Repository(root=tmp_path)
        assert repo.default_upstream == ""
        assert repo.override_patterns == ()

    def test_rejects_relative_root(self):
        with pytest.raises(ValueError, match="absolute"):
            Repository(root=Path("relative/dir"))

    def test_is_immutable(self, tmp_path: Path):
        repo = Repository(root=tmp_path, default_upstream="origin/main")
        with pytest.raises(FrozenInstanceError):
            repo.default_upstream = "origin/other"  # type: ignore[misc]

    def test_relative_for_absolute_path_inside_root(self, tmp_path: Path):
        repo = Repository(root=tmp_path)
        assert repo.relative(tmp_path / "src" / "app.py") == Path("src/app.py")

    def test_relative_for_path_already_relative(self, tmp_path: Path):
        repo = Repository(root=tmp_path)
        assert repo.relative(Path("src/app.py")) == Path("src/app.py")

    def test_relative_for_path_outside_root(self, tmp_path: Path):
        repo = Repository(root=tmp_path / "repo")
        assert repo.relative(tmp_path / "elsewhere" / "file.txt") is None

    def test_relative_for_root_itself(self, tmp_path: Path):
        repo = Repository(root=tmp_path)
        assert repo.relative(tmp_path) == Path(".")

    def test_holds_compiled_patterns(self, tmp_path: Path):
        patterns = (re.compile(r"\.gen\.py$"),)
        repo = Repository(root=tmp_path, override_patterns=patterns)
        assert repo.override_patterns[0].search("models.gen.py")


class TestFileEvent:
    """Tests for FileEvent."""

    def test_write_event_is_write(self):
        event = FileEvent(kind=FileEventKind.WRITE, path=Path("/repo/.git/HEAD"))
        assert event.is_write

    @pytest.mark.parametrize(
        "kind",
        [FileEventKind.CREATE, FileEventKind.REMOVE, FileEventKind.RENAME, FileEventKind.OTHER],
    )
    def test_other_kinds_are_not_writes(self, kind: FileEventKind):
        assert not FileEvent(kind=kind, path=Path("/repo/.git/index")).is_write


def test_watcher_states_have_string_values():
    assert WatcherState.STARTING.value == "starting"
    assert WatcherState.WATCHING.value == "watching"
    assert WatcherState.STOPPED.value == "stopped"
