"""Git repository management."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from git import Actor, Commit, Repo
from git.exc import (
    BadName,
    BadObject,
    GitCommandError,
    InvalidGitRepositoryError,
    NoSuchPathError,
)

from iterspace.core.exceptions import (
    CheckoutError,
    EmptyCommitError,
    OperationError,
    ReferenceNotFoundError,
)
from iterspace.core.types import METADATA_DIR

logger = logging.getLogger(__name__)


@dataclass
class CommitInfo:
    """Git commit information."""

    hash: str
    short_hash: str
    message: str
    author: str
    timestamp: str
    committed_datetime: datetime | None = None
    parents: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_commit(cls, commit: Commit) -> "CommitInfo":
        """Build CommitInfo from a GitPython commit."""
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        return cls(
            hash=commit.hexsha,
            short_hash=commit.hexsha[:7],
            message=message,
            author=str(commit.author),
            timestamp=commit.committed_datetime.isoformat(),
            committed_datetime=commit.committed_datetime,
            parents=tuple(p.hexsha for p in commit.parents),
        )


class GitManager:
    """Manages Git repository operations for a single working directory."""

    def __init__(self, repo_path: Path) -> None:
        """Initialize Git manager.

        Args:
            repo_path: Path to the repository.
        """
        self._repo_path = Path(repo_path).resolve()
        self._repo: Repo | None = None

    @property
    def repo_path(self) -> Path:
        """Get repository path."""
        return self._repo_path

    @property
    def metadata_path(self) -> Path:
        """Get path of the repository metadata directory."""
        return self._repo_path / METADATA_DIR

    @property
    def repo(self) -> Repo | None:
        """Get Git repository object."""
        if self._repo is None:
            try:
                self._repo = Repo(self._repo_path)
            except (InvalidGitRepositoryError, NoSuchPathError):
                pass
        return self._repo

    @property
    def is_initialized(self) -> bool:
        """Check if repository is initialized."""
        return self.metadata_path.exists()

    def _require_repo(self) -> Repo:
        repo = self.repo
        if repo is None:
            raise OperationError(f"No repository at {self._repo_path}")
        return repo

    def init(self, initial_branch: str) -> bool:
        """Initialize Git repository.

        HEAD is pointed at ``initial_branch``; the branch itself comes into
        existence with the first commit.

        Args:
            initial_branch: Name of the initial branch.

        Returns:
            True if initialized, False if already exists.
        """
        if self.is_initialized:
            return False

        self._repo_path.mkdir(parents=True, exist_ok=True)
        self._repo = Repo.init(self._repo_path)
        self._repo.git.symbolic_ref("HEAD", f"refs/heads/{initial_branch}")
        logger.info(f"Initialized repository at {self._repo_path}")
        return True

    def add_all(self) -> None:
        """Stage additions, modifications and deletions."""
        self._require_repo().git.add("-A")

    def has_staged_changes(self) -> bool:
        """Check if the index differs from HEAD."""
        repo = self._require_repo()
        if not repo.head.is_valid():
            return True
        return bool(repo.index.diff("HEAD"))

    def commit(
        self, message: str, author: Actor | None = None, allow_empty: bool = False
    ) -> str:
        """Create a commit from the index on top of HEAD.

        Args:
            message: Commit message.
            author: Author and committer identity.
            allow_empty: Record the commit even if the tree did not change.

        Returns:
            Commit hash.

        Raises:
            EmptyCommitError: If nothing is staged and allow_empty is False.
        """
        repo = self._require_repo()
        if not allow_empty and not self.has_staged_changes():
            raise EmptyCommitError("nothing to commit, working tree clean")

        commit = repo.index.commit(message, author=author, committer=author)
        return commit.hexsha

    def resolve(self, ref: str) -> str:
        """Resolve a reference to a commit hash.

        Raises:
            ReferenceNotFoundError: If ``ref`` names no commit.
        """
        repo = self._require_repo()
        try:
            return repo.commit(ref).hexsha
        except (BadName, BadObject, ValueError) as e:
            raise ReferenceNotFoundError(ref) from e

    def get_commit(self, ref: str) -> CommitInfo | None:
        """Get commit info by reference.

        Returns:
            CommitInfo or None if not found.
        """
        if self.repo is None:
            return None

        try:
            return CommitInfo.from_commit(self.repo.commit(ref))
        except (BadName, BadObject, ValueError):
            return None

    def get_current_commit(self) -> CommitInfo | None:
        """Get current HEAD commit info.

        Returns:
            CommitInfo or None if no commits.
        """
        if self.repo is None or not self.repo.head.is_valid():
            return None
        return CommitInfo.from_commit(self.repo.head.commit)

    def iter_history(
        self, rev: str = "HEAD", max_count: int | None = None
    ) -> list[CommitInfo]:
        """List commits reachable from ``rev``, newest first.

        Raises:
            OperationError: If the history cannot be walked.
        """
        repo = self._require_repo()
        try:
            if max_count is None:
                commits = repo.iter_commits(rev)
            else:
                commits = repo.iter_commits(rev, max_count=max_count)
            return [CommitInfo.from_commit(c) for c in commits]
        except (GitCommandError, ValueError) as e:
            raise OperationError(f"Cannot walk history from {rev}: {e}") from e

    def reset_content(self, ref: str) -> None:
        """Make index and working tree match ``ref`` without moving HEAD.

        Tracked files missing from ``ref`` are removed. Untracked files are
        left alone.
        """
        repo = self._require_repo()
        try:
            repo.git.read_tree("-u", "--reset", ref)
        except GitCommandError as e:
            raise OperationError(f"Reset to {ref} failed: {e}") from e

    def list_branches(self) -> list[str]:
        """List local branch names."""
        if self.repo is None:
            return []
        return [head.name for head in self.repo.heads]

    def branch_exists(self, name: str) -> bool:
        """Check if a local branch exists."""
        return name in self.list_branches()

    def create_branch(self, name: str, checkout: bool = True) -> None:
        """Create a new branch at HEAD.

        Args:
            name: Branch name.
            checkout: Whether to checkout the new branch.
        """
        repo = self._require_repo()
        try:
            repo.create_head(name)
        except (OSError, GitCommandError, ValueError) as e:
            raise OperationError(f"Cannot create branch {name}: {e}") from e

        if checkout:
            self.checkout(name)

    def checkout(self, ref: str, force: bool = False) -> None:
        """Checkout a branch.

        Args:
            ref: Branch name.
            force: Discard local changes that would block the switch.

        Raises:
            CheckoutError: If git refuses the switch.
        """
        repo = self._require_repo()
        args = ["-f", ref, "--"] if force else [ref, "--"]
        try:
            repo.git.checkout(*args)
        except GitCommandError as e:
            raise CheckoutError(f"Checkout of {ref} failed: {e.stderr.strip()}") from e

    def get_current_branch(self) -> str | None:
        """Get current branch name.

        Returns:
            Branch name or None if detached HEAD.
        """
        if self.repo is None:
            return None

        try:
            return self.repo.active_branch.name
        except TypeError:
            return None  # Detached HEAD

    def close(self) -> None:
        """Release handles held by the repository object."""
        if self._repo is not None:
            self._repo.close()
            self._repo = None
