"""Branch-per-iteration versioning of a working directory.

A ``VersionedWorkspace`` keeps a permanent main line (branch ``A``) and
short-lived alternate lines ``B`` .. ``Z`` spawned from the current head.
Alternates are promoted back by copying their content onto main as one new
revision (``rewrite_to_main``).

Workspaces constructed with the anonymous identity carry no revision engine;
every operation then short-circuits.
"""

import logging
import shutil
from pathlib import Path
from typing import Any

from git import Actor
from git.exc import GitCommandError

from iterspace.core.exceptions import (
    CheckoutError,
    NotInitializedError,
    OperationError,
    PurgeError,
    RewriteError,
    SetupError,
)
from iterspace.core.types import (
    ANONYMOUS_IDENTITY,
    MAIN_BRANCH,
    MAX_ALTERNATE_BRANCHES,
    METADATA_DIR,
    CommitResult,
    HistoryEntry,
    VcrConfig,
    WorkspaceMode,
    WorkspaceState,
)
from iterspace.workspace.git import GitManager

logger = logging.getLogger(__name__)

HISTORY_TIME_FORMAT = "%Y-%m-%d %H:%M"


def branch_name_for(count: int) -> str | None:
    """Get the alternate branch name for a number of existing alternates.

    Args:
        count: Number of existing branches other than main.

    Returns:
        Single letter following main's, or None once all letters are taken.
    """
    if count < 0 or count >= MAX_ALTERNATE_BRANCHES:
        return None
    return chr(ord(MAIN_BRANCH) + 1 + count)


class VersionedWorkspace:
    """Versioning orchestration for one working directory."""

    def __init__(
        self,
        identity: str,
        workdir: str | Path,
        config: VcrConfig | None = None,
        engine: GitManager | None = None,
    ) -> None:
        """Initialize versioned workspace.

        In normal mode the repository is opened, or created with the main
        branch and one initialization commit if none exists.

        Args:
            identity: User identity. ``"default"`` selects anonymous mode.
            workdir: Working directory root.
            config: Versioning configuration.
            engine: Revision engine to attach instead of a new GitManager.

        Raises:
            SetupError: If the repository cannot be created.
        """
        self._identity = identity
        self._workdir = Path(workdir).resolve()
        self._config = config or VcrConfig()
        self._engine: GitManager | None = None

        if identity == ANONYMOUS_IDENTITY:
            self._mode = WorkspaceMode.ANONYMOUS
            return

        self._mode = WorkspaceMode.NORMAL
        self._engine = self._open_store(engine or GitManager(self._workdir))

    def _open_store(self, engine: GitManager) -> GitManager:
        if engine.repo is not None:
            return engine

        created = not self.metadata_path.exists()
        try:
            engine.init(MAIN_BRANCH)
            engine.add_all()
            engine.commit(
                self._config.init_message, author=self._author, allow_empty=True
            )
        except (GitCommandError, OperationError, OSError, ValueError) as e:
            # A store without its first revision must not be reopened later
            engine.close()
            if created:
                shutil.rmtree(self.metadata_path, ignore_errors=True)
            raise SetupError(f"Failed to init repo at {self._workdir}: {e}") from e
        return engine

    @property
    def _author(self) -> Actor:
        return Actor(self._config.author_name, self._config.author_email)

    @property
    def identity(self) -> str:
        """Get user identity."""
        return self._identity

    @property
    def workdir(self) -> Path:
        """Get working directory root."""
        return self._workdir

    @property
    def config(self) -> VcrConfig:
        """Get versioning configuration."""
        return self._config

    @property
    def mode(self) -> WorkspaceMode:
        """Get workspace mode."""
        return self._mode

    @property
    def engine(self) -> GitManager | None:
        """Get attached revision engine, if any."""
        return self._engine

    @property
    def is_attached(self) -> bool:
        """Check if a revision engine is attached."""
        return self._engine is not None

    @property
    def metadata_path(self) -> Path:
        """Get path of the version metadata directory."""
        return self._workdir / METADATA_DIR

    @property
    def branch_count(self) -> int:
        """Get number of branches other than main."""
        if self._engine is None:
            return 0
        return sum(1 for b in self._engine.list_branches() if b != MAIN_BRANCH)

    @property
    def state(self) -> WorkspaceState:
        """Get lifecycle state of the version store."""
        if self._engine is None or not self._engine.is_initialized:
            return WorkspaceState.UNINITIALIZED
        if self.branch_count:
            return WorkspaceState.BRANCHED
        return WorkspaceState.INITIALIZED

    @property
    def current_branch(self) -> str | None:
        """Get name of the checked out branch."""
        if self._engine is None:
            return None
        return self._engine.get_current_branch()

    def _attached(self) -> GitManager:
        if self._engine is None:
            raise NotInitializedError()
        return self._engine

    def _detached_result(self) -> CommitResult:
        if self._mode == WorkspaceMode.ANONYMOUS:
            return CommitResult.anonymous()
        return CommitResult.not_initialized()

    def _record(self, message: str, allow_empty: bool = False) -> CommitResult:
        engine = self._attached()
        try:
            engine.add_all()
            revision = engine.commit(
                message, author=self._author, allow_empty=allow_empty
            )
        except (GitCommandError, OperationError, OSError, ValueError) as e:
            logger.warning(f"Commit failed: {e}")
            return CommitResult.failed(str(e))

        logger.debug(f"Committed {revision[:7]}: {message}")
        return CommitResult.success(revision)

    def commit(self, message: str) -> CommitResult:
        """Snapshot all working directory changes as a new revision.

        Args:
            message: Commit message.

        Returns:
            CommitResult holding the new revision id. A failed result (for
            example when there is nothing to commit) is logged, never raised.
        """
        if self._engine is None:
            return self._detached_result()
        return self._record(message)

    def next_branch_name(self) -> str | None:
        """Allocate the name of the next alternate branch.

        The name is derived from the current number of alternates, so a
        deleted branch frees its letter. A letter that is still taken
        yields None rather than reusing a live branch.

        Returns:
            Branch name, or None if no name is available.
        """
        if self._engine is None:
            return None

        branches = self._engine.list_branches()
        count = sum(1 for b in branches if b != MAIN_BRANCH)
        name = branch_name_for(count)
        if name is None:
            logger.warning(f"Branch limit reached: {count} alternates exist")
            return None
        if name in branches:
            logger.warning(f"Next branch name {name} is already in use")
            return None
        return name

    def branch_from(self, base_ref: str, comment: str) -> CommitResult:
        """Start a new alternate line at the current head.

        The branch is created, checked out and marked with a commit whose
        message names ``base_ref`` and ``comment``. Files are not touched.

        Args:
            base_ref: Reference the iteration is based on, recorded in the
                commit message.
            comment: Free text describing the iteration.

        Returns:
            CommitResult holding the marker revision id.
        """
        if self._engine is None:
            return self._detached_result()

        name = self.next_branch_name()
        if name is None:
            return CommitResult.failed("no branch name available")

        try:
            self._engine.create_branch(name, checkout=True)
        except OperationError as e:
            logger.warning(f"Checkout failed: {e}")
            return CommitResult.failed(str(e))

        logger.info(f"Created branch {name} from {base_ref}")
        return self._record(f"Branched from {base_ref}: {comment}", allow_empty=True)

    def get_history(self) -> list[HistoryEntry]:
        """List revisions reachable from the current head, oldest first.

        Returns:
            HistoryEntry per revision, ordered by minute-precision
            timestamp. Revisions within the same minute keep ancestry
            order instead of being ordered by message text. Empty when
            detached or when the walk fails.
        """
        if self._engine is None:
            return []

        try:
            commits = self._engine.iter_history()
        except OperationError as e:
            logger.warning(f"Cannot get commit log: {e}")
            return []

        entries = [
            HistoryEntry(
                timestamp=c.committed_datetime.strftime(HISTORY_TIME_FORMAT),
                message=c.message,
                revision=c.hash,
            )
            for c in reversed(commits)
            if c.committed_datetime is not None
        ]
        # Stable: revisions within the same minute stay in ancestry order
        return sorted(entries, key=lambda e: e.timestamp)

    def checkout(self, branch: str) -> None:
        """Switch to another branch.

        Git's default safety rules apply: the switch is refused if it would
        overwrite uncommitted changes.

        Raises:
            NotInitializedError: If no engine is attached.
            CheckoutError: If the branch is unknown or the switch is refused.
        """
        engine = self._attached()
        if not engine.branch_exists(branch):
            raise CheckoutError(f"Unknown branch: {branch}")
        engine.checkout(branch)

    def rewrite_to_main(self, source_ref: str, message: str) -> str:
        """Promote the content of ``source_ref`` onto the main line.

        Main is force-checked out, its tracked content replaced with the tree
        of ``source_ref`` and one new revision recorded on top of main's
        previous head. Main's ancestry is kept.

        Args:
            source_ref: Branch name or revision to promote.
            message: Commit message of the promotion revision.

        Returns:
            Id of the new main revision.

        Raises:
            NotInitializedError: If no engine is attached.
            CheckoutError: If main cannot be checked out.
            ReferenceNotFoundError: If ``source_ref`` does not resolve.
            RewriteError: If the reset or commit fails.
        """
        engine = self._attached()
        engine.checkout(MAIN_BRANCH, force=True)
        revision = engine.resolve(source_ref)

        try:
            engine.reset_content(revision)
            new_head = engine.commit(message, author=self._author, allow_empty=True)
        except (GitCommandError, OperationError, OSError, ValueError) as e:
            raise RewriteError(
                f"Rewrite of {MAIN_BRANCH} from {source_ref} failed: {e}"
            ) from e

        logger.info(f"Promoted {source_ref} ({revision[:7]}) to {MAIN_BRANCH}")
        return new_head

    def purge(self) -> None:
        """Delete all version history and branches.

        Working files are left untouched. Purging a workspace without
        metadata, or an anonymous workspace, is a no-op.

        Raises:
            PurgeError: If the metadata directory cannot be removed.
        """
        if self._mode == WorkspaceMode.ANONYMOUS:
            return

        if self._engine is not None:
            self._engine.close()

        path = self.metadata_path
        if path.exists():
            try:
                shutil.rmtree(path)
            except OSError as e:
                raise PurgeError(f"failed to remove {path}: {e}") from e
            logger.info(f"Purged version history at {self._workdir}")

        self._engine = None

    def close(self) -> None:
        """Release handles held by the revision engine.

        The engine stays attached and reopens the store on next use.
        """
        if self._engine is not None:
            self._engine.close()

    def __enter__(self) -> "VersionedWorkspace":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
