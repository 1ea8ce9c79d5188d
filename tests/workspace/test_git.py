"""Tests for iterspace.workspace.git module."""

from pathlib import Path

import pytest
from git import Actor

from iterspace.core.exceptions import (
    CheckoutError,
    EmptyCommitError,
    OperationError,
    ReferenceNotFoundError,
)
from iterspace.workspace.git import CommitInfo, GitManager


def _init(path: Path, author: Actor) -> GitManager:
    manager = GitManager(path)
    manager.init("A")
    manager.add_all()
    manager.commit("Initialized", author=author, allow_empty=True)
    return manager


class TestCommitInfo:
    """Tests for CommitInfo dataclass."""

    def test_create_commit_info(self) -> None:
        """Test creating CommitInfo."""
        info = CommitInfo(
            hash="abc123def456",
            short_hash="abc123d",
            message="Test commit",
            author="Test User",
            timestamp="2024-01-01T12:00:00",
        )
        assert info.hash == "abc123def456"
        assert info.short_hash == "abc123d"
        assert info.committed_datetime is None
        assert info.parents == ()


class TestGitManager:
    """Tests for GitManager class."""

    def test_not_initialized(self, temp_dir: Path) -> None:
        """Test a plain directory has no repository."""
        manager = GitManager(temp_dir)
        assert manager.repo_path == temp_dir
        assert manager.is_initialized is False
        assert manager.repo is None
        assert manager.list_branches() == []
        assert manager.get_current_commit() is None

    def test_init_sets_initial_branch(self, temp_dir: Path) -> None:
        """Test init points HEAD at the requested branch."""
        manager = GitManager(temp_dir)
        assert manager.init("A") is True
        assert (temp_dir / ".git").exists()

        assert manager.repo is not None
        assert manager.repo.head.reference.name == "A"

    def test_init_idempotent(self, temp_dir: Path) -> None:
        """Test that init returns False if already initialized."""
        manager = GitManager(temp_dir)
        manager.init("A")
        assert manager.init("A") is False

    def test_init_creates_missing_directory(self, temp_dir: Path) -> None:
        """Test init creates the repository directory."""
        manager = GitManager(temp_dir / "new")
        manager.init("A")
        assert (temp_dir / "new" / ".git").is_dir()

    def test_initial_commit_on_empty_directory(
        self, temp_dir: Path, author: Actor
    ) -> None:
        """Test the first commit may be empty."""
        manager = _init(temp_dir, author)

        info = manager.get_current_commit()
        assert info is not None
        assert info.message == "Initialized"
        assert info.parents == ()
        assert manager.list_branches() == ["A"]

    def test_commit_returns_hash(self, temp_dir: Path, author: Actor) -> None:
        """Test creating a commit."""
        manager = _init(temp_dir, author)
        (temp_dir / "file.txt").write_text("content", encoding="utf-8")
        manager.add_all()

        commit_hash = manager.commit("Test commit message", author=author)

        assert len(commit_hash) == 40  # SHA-1 hash length
        info = manager.get_commit(commit_hash)
        assert info is not None
        assert info.author == "Test User"

    def test_commit_without_changes_raises(
        self, temp_dir: Path, author: Actor
    ) -> None:
        """Test empty commits are refused by default."""
        manager = _init(temp_dir, author)
        manager.add_all()

        with pytest.raises(EmptyCommitError):
            manager.commit("Nothing", author=author)

    def test_commit_allow_empty(self, temp_dir: Path, author: Actor) -> None:
        """Test empty commits when allowed."""
        manager = _init(temp_dir, author)
        before = manager.get_current_commit()
        assert before is not None

        commit_hash = manager.commit("Marker", author=author, allow_empty=True)

        info = manager.get_commit(commit_hash)
        assert info is not None
        assert info.parents == (before.hash,)

    def test_add_all_stages_deletions(self, temp_dir: Path, author: Actor) -> None:
        """Test removed files are staged."""
        (temp_dir / "gone.txt").write_text("x", encoding="utf-8")
        manager = _init(temp_dir, author)

        (temp_dir / "gone.txt").unlink()
        manager.add_all()

        assert manager.has_staged_changes() is True
        manager.commit("Remove file", author=author)
        assert manager.repo is not None
        assert "gone.txt" not in [e.path for e in manager.repo.head.commit.tree.traverse()]

    def test_resolve(self, temp_dir: Path, author: Actor) -> None:
        """Test resolving branch names and hashes."""
        manager = _init(temp_dir, author)
        head = manager.get_current_commit()
        assert head is not None

        assert manager.resolve("A") == head.hash
        assert manager.resolve(head.short_hash) == head.hash

    def test_resolve_unknown(self, temp_dir: Path, author: Actor) -> None:
        """Test unknown references raise."""
        manager = _init(temp_dir, author)
        with pytest.raises(ReferenceNotFoundError):
            manager.resolve("no-such-branch")

    def test_get_commit_unknown(self, temp_dir: Path, author: Actor) -> None:
        """Test get_commit returns None for unknown references."""
        manager = _init(temp_dir, author)
        assert manager.get_commit("no-such-branch") is None

    def test_iter_history(self, temp_dir: Path, author: Actor) -> None:
        """Test history is listed newest first."""
        manager = _init(temp_dir, author)
        for i in range(3):
            (temp_dir / f"file{i}.txt").write_text(f"{i}", encoding="utf-8")
            manager.add_all()
            manager.commit(f"Commit {i}", author=author)

        history = manager.iter_history()

        assert [c.message for c in history] == [
            "Commit 2",
            "Commit 1",
            "Commit 0",
            "Initialized",
        ]
        assert len(manager.iter_history(max_count=2)) == 2

    def test_create_branch(self, temp_dir: Path, author: Actor) -> None:
        """Test creating and checking out a branch."""
        manager = _init(temp_dir, author)

        manager.create_branch("B")

        assert manager.get_current_branch() == "B"
        assert manager.branch_exists("B") is True
        assert sorted(manager.list_branches()) == ["A", "B"]

    def test_create_branch_without_checkout(
        self, temp_dir: Path, author: Actor
    ) -> None:
        """Test creating a branch without checkout."""
        manager = _init(temp_dir, author)

        manager.create_branch("B", checkout=False)

        assert manager.get_current_branch() == "A"

    def test_checkout(self, temp_dir: Path, author: Actor) -> None:
        """Test switching branches."""
        manager = _init(temp_dir, author)
        manager.create_branch("B", checkout=False)

        manager.checkout("B")

        assert manager.get_current_branch() == "B"

    def test_checkout_unknown_branch(self, temp_dir: Path, author: Actor) -> None:
        """Test checkout of an unknown branch raises."""
        manager = _init(temp_dir, author)
        with pytest.raises(CheckoutError):
            manager.checkout("Q")

    def test_checkout_branch_named_like_file(
        self, temp_dir: Path, author: Actor
    ) -> None:
        """Test branch names win over identically named files."""
        (temp_dir / "B").write_text("file named B", encoding="utf-8")
        manager = _init(temp_dir, author)
        manager.create_branch("B", checkout=False)

        manager.checkout("B")

        assert manager.get_current_branch() == "B"

    def test_reset_content_keeps_head(self, temp_dir: Path, author: Actor) -> None:
        """Test content reset leaves the branch pointer in place."""
        (temp_dir / "keep.txt").write_text("v1", encoding="utf-8")
        manager = _init(temp_dir, author)
        first = manager.resolve("HEAD")

        (temp_dir / "keep.txt").write_text("v2", encoding="utf-8")
        (temp_dir / "extra.txt").write_text("extra", encoding="utf-8")
        manager.add_all()
        second = manager.commit("Second", author=author)

        manager.reset_content(first)

        assert manager.resolve("HEAD") == second
        assert (temp_dir / "keep.txt").read_text(encoding="utf-8") == "v1"
        assert not (temp_dir / "extra.txt").exists()

    def test_reset_content_unknown_ref(self, temp_dir: Path, author: Actor) -> None:
        """Test content reset to an unknown ref raises."""
        manager = _init(temp_dir, author)
        with pytest.raises(OperationError):
            manager.reset_content("0" * 40)

    def test_close_reopens_lazily(self, temp_dir: Path, author: Actor) -> None:
        """Test the repository is reopened after close."""
        manager = _init(temp_dir, author)
        manager.close()
        assert manager.repo is not None
        assert manager.get_current_branch() == "A"
