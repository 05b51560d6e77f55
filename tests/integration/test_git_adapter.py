"""Integration tests for the Git adapter.

These tests create real git repositories and exercise every RepositoryState
query against them.
"""

import logging
from pathlib import Path

import pytest

from repostate.adapters.git_cmd import GitAdapter
from repostate.domain.config import RepoStateConfig, UpstreamConfig
from repostate.domain.exceptions import GitCommandError, NotARepositoryError
from tests.conftest import create_git_repo, git_add_and_commit, run_git


@pytest.fixture
def adapter(git_repo: Path) -> GitAdapter:
    return GitAdapter.open(git_repo)


class TestOpen:
    """Tests for locating repositories."""

    def test_root_is_resolved(self, git_repo: Path):
        assert GitAdapter.open(git_repo).root == git_repo

    def test_from_subdirectory(self, git_repo: Path):
        assert GitAdapter.open(git_repo / "src").root == git_repo

    def test_from_deeply_nested_directory(self, git_repo: Path):
        deep = git_repo / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert GitAdapter.open(deep).root == GitAdapter.open(git_repo).root

    def test_through_symlink(self, git_repo: Path, tmp_path: Path):
        link = tmp_path / "link"
        link.symlink_to(git_repo)
        assert GitAdapter.open(link / "src").root == git_repo

    def test_outside_repository(self, tmp_path: Path):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(NotARepositoryError):
            GitAdapter.open(plain)


class TestUpstream:
    """Tests for default upstream detection."""

    def test_no_remotes_gives_empty_upstream(self, git_repo: Path, caplog):
        with caplog.at_level(logging.WARNING):
            adapter = GitAdapter.open(git_repo)
        assert adapter.default_upstream == ""
        assert "GIT_DEFAULT_UPSTREAM" in caplog.text

    def test_detects_origin_main(self, git_repo: Path):
        run_git(git_repo, "update-ref", "refs/remotes/origin/main", "HEAD")
        assert GitAdapter.open(git_repo).default_upstream == "origin/main"

    def test_falls_back_to_origin_master(self, git_repo: Path):
        run_git(git_repo, "update-ref", "refs/remotes/origin/master", "HEAD")
        assert GitAdapter.open(git_repo).default_upstream == "origin/master"

    def test_override_wins_over_remotes(self, git_repo: Path):
        run_git(git_repo, "update-ref", "refs/remotes/origin/main", "HEAD")
        config = RepoStateConfig(upstream=UpstreamConfig(override="origin/release"))

        assert GitAdapter.open(git_repo, config=config).default_upstream == "origin/release"

    def test_resolved_once_at_construction(self, git_repo: Path):
        adapter = GitAdapter.open(git_repo)
        run_git(git_repo, "update-ref", "refs/remotes/origin/main", "HEAD")
        assert adapter.default_upstream == ""


class TestBranchAndSha:
    """Tests for branch and commit queries."""

    def test_get_branch(self, adapter: GitAdapter):
        assert adapter.get_branch() == "main"

    def test_get_branch_after_checkout(self, adapter: GitAdapter, git_repo: Path):
        run_git(git_repo, "checkout", "-b", "feature/x")
        assert adapter.get_branch() == "feature/x"

    def test_detached_head(self, adapter: GitAdapter, git_repo: Path):
        run_git(git_repo, "checkout", "--detach")
        assert adapter.get_branch() == ""

    def test_get_sha(self, adapter: GitAdapter, git_repo: Path):
        assert adapter.get_sha() == run_git(git_repo, "rev-parse", "HEAD").strip()


class TestWorkingHash:
    """Tests for get_working_hash."""

    def test_stable_without_changes(self, adapter: GitAdapter):
        assert adapter.get_working_hash() == adapter.get_working_hash()

    def test_changes_when_tracked_file_edited(self, adapter: GitAdapter, git_repo: Path):
        before = adapter.get_working_hash()
        (git_repo / "src" / "app.py").write_text("def main():\n    return 1\n")
        assert adapter.get_working_hash() != before

    def test_changes_when_edit_is_staged(self, adapter: GitAdapter, git_repo: Path):
        clean = adapter.get_working_hash()
        (git_repo / "README.md").write_text("# Changed\n")
        run_git(git_repo, "add", "README.md")
        assert adapter.get_working_hash() != clean

    def test_reverting_edit_restores_hash(self, adapter: GitAdapter, git_repo: Path):
        clean = adapter.get_working_hash()
        path = git_repo / "README.md"
        original = path.read_text()
        path.write_text("# Temporary\n")
        path.write_text(original)
        assert adapter.get_working_hash() == clean

    def test_changes_after_commit(self, adapter: GitAdapter, git_repo: Path):
        before = adapter.get_working_hash()
        (git_repo / "new.txt").write_text("new\n")
        git_add_and_commit(git_repo, "Add new file")
        assert adapter.get_working_hash() != before

    def test_untracked_files_do_not_change_hash(self, adapter: GitAdapter, git_repo: Path):
        before = adapter.get_working_hash()
        (git_repo / "scratch.txt").write_text("untracked\n")
        assert adapter.get_working_hash() == before

    def test_same_from_subdirectory(self, adapter: GitAdapter, git_repo: Path):
        (git_repo / "src" / "util.py").write_text("changed = True\n")
        assert GitAdapter.open(git_repo / "src").get_working_hash() == adapter.get_working_hash()

    def test_repository_without_commits_raises(self, tmp_path: Path):
        empty = create_git_repo(tmp_path / "empty")
        with pytest.raises(GitCommandError):
            GitAdapter.open(empty).get_working_hash()


class TestChangedPaths:
    """Tests for get_changed_paths."""

    @pytest.fixture
    def branched_repo(self, git_repo: Path) -> Path:
        """Repo with a ``base`` branch at the initial commit and work on top."""
        run_git(git_repo, "branch", "base")
        (git_repo / "src" / "app.py").write_text("def main():\n    return 42\n")
        (git_repo / "docs").mkdir()
        (git_repo / "docs" / "guide.md").write_text("# Guide\n")
        git_add_and_commit(git_repo, "Work on main")
        # Uncommitted edit to a tracked file
        (git_repo / "src" / "util.py").write_text("def helper():\n    return 2\n")
        return git_repo

    def test_committed_and_uncommitted_changes(self, branched_repo: Path):
        changed = GitAdapter.open(branched_repo).get_changed_paths("base")

        assert changed == {
            branched_repo / "src" / "app.py",
            branched_repo / "docs" / "guide.md",
            branched_repo / "src" / "util.py",
        }

    def test_paths_are_absolute_and_under_root(self, branched_repo: Path):
        adapter = GitAdapter.open(branched_repo)
        for path in adapter.get_changed_paths("base"):
            assert path.is_absolute()
            assert path.is_relative_to(adapter.root)

    def test_no_duplicates_for_file_changed_both_ways(self, branched_repo: Path):
        (branched_repo / "src" / "app.py").write_text("def main():\n    return 43\n")

        changed = GitAdapter.open(branched_repo).get_changed_paths("base")

        assert len([p for p in changed if p.name == "app.py"]) == 1

    def test_untracked_files_not_included(self, branched_repo: Path):
        (branched_repo / "scratch.txt").write_text("untracked\n")
        changed = GitAdapter.open(branched_repo).get_changed_paths("base")
        assert branched_repo / "scratch.txt" not in changed

    def test_same_result_from_subdirectory(self, branched_repo: Path):
        from_root = GitAdapter.open(branched_repo).get_changed_paths("base")
        from_sub = GitAdapter.open(branched_repo / "docs").get_changed_paths("base")
        assert from_root == from_sub

    def test_invalid_ref_returns_empty_and_warns(self, branched_repo: Path, caplog):
        adapter = GitAdapter.open(branched_repo)

        with caplog.at_level(logging.WARNING, logger="repostate.core.changes"):
            changed = adapter.get_changed_paths("no-such-ref")

        assert changed == frozenset()
        assert "no-such-ref" in caplog.text

    def test_clean_tree_against_head(self, adapter: GitAdapter):
        assert adapter.get_changed_paths("HEAD") == frozenset()


class TestTrackedAndIgnored:
    """Tests for is_tracked and is_ignored."""

    def test_committed_file_is_tracked(self, adapter: GitAdapter, git_repo: Path):
        assert adapter.is_tracked(git_repo / "src" / "app.py")

    def test_new_file_is_not_tracked(self, adapter: GitAdapter, git_repo: Path):
        (git_repo / "new.py").write_text("x = 1\n")
        assert not adapter.is_tracked(git_repo / "new.py")

    def test_override_pattern_makes_untracked_file_tracked(self, git_repo: Path):
        (git_repo / "._treat_as_tracked").write_text("^generated/\n")
        (git_repo / "generated").mkdir()
        (git_repo / "generated" / "schema.py").write_text("SCHEMA = {}\n")

        adapter = GitAdapter.open(git_repo)

        assert adapter.is_tracked(git_repo / "generated" / "schema.py")
        assert not adapter.is_tracked(git_repo / "other.py")

    def test_ignored_file(self, git_repo: Path):
        (git_repo / ".gitignore").write_text("*.log\n")
        (git_repo / "debug.log").write_text("noise\n")
        adapter = GitAdapter.open(git_repo)

        assert adapter.is_ignored(git_repo / "debug.log")
        assert not adapter.is_ignored(git_repo / "src" / "app.py")

    def test_ignored_and_tracked_via_override(self, git_repo: Path):
        (git_repo / ".gitignore").write_text("build/\n")
        (git_repo / "._treat_as_tracked").write_text("^build/\n")
        (git_repo / "build").mkdir()
        (git_repo / "build" / "out.js").write_text("console.log(1)\n")
        adapter = GitAdapter.open(git_repo)

        target = git_repo / "build" / "out.js"
        assert adapter.is_ignored(target)
        assert adapter.is_tracked(target)

    def test_queries_do_not_depend_on_cwd(
        self, adapter: GitAdapter, git_repo: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        assert adapter.is_tracked(git_repo / "README.md")
        assert adapter.get_branch() == "main"
