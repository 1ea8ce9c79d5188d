"""Type definitions for iterspace."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from iterspace.core.exceptions import ConfigError

# Identity that puts a workspace into anonymous (no-op) mode
ANONYMOUS_IDENTITY = "default"

MAIN_BRANCH = "A"
MAX_ALTERNATE_BRANCHES = 25
METADATA_DIR = ".git"

# Compatibility return values of commit / branch_from
ANONYMOUS_SENTINEL = "?"
FAILURE_SENTINEL = ""

STORAGE_ROOT_ENV_KEY = "STORAGE_ROOT"
STORAGE_ROOT_DEFAULT = "/data/storage"


class WorkspaceMode(Enum):
    """Capability set of a versioned workspace."""

    NORMAL = "normal"
    ANONYMOUS = "anonymous"


class WorkspaceState(Enum):
    """Lifecycle state of the version store."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    BRANCHED = "branched"


class ResultStatus(Enum):
    """Outcome of a revision-producing operation."""

    OK = "ok"
    ANONYMOUS = "anonymous"
    NOT_INITIALIZED = "not_initialized"
    FAILED = "failed"


@dataclass(frozen=True)
class CommitResult:
    """Result of commit or branch_from."""

    status: ResultStatus
    revision: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, revision: str) -> "CommitResult":
        """Result carrying a new revision id."""
        return cls(ResultStatus.OK, revision)

    @classmethod
    def anonymous(cls) -> "CommitResult":
        """Result of an operation skipped in anonymous mode."""
        return cls(ResultStatus.ANONYMOUS, reason="anonymous workspace")

    @classmethod
    def not_initialized(cls) -> "CommitResult":
        """Result of an operation on a workspace without a store."""
        return cls(ResultStatus.NOT_INITIALIZED, reason="no repo initialized")

    @classmethod
    def failed(cls, reason: str) -> "CommitResult":
        """Result of a failed operation, with the logged reason."""
        return cls(ResultStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        """Check if a new revision was produced."""
        return self.status == ResultStatus.OK

    @property
    def sentinel(self) -> str:
        """Get the single-string form of this result.

        Returns the revision id on success, ``"?"`` in anonymous mode and
        ``""`` for every failure.
        """
        if self.status == ResultStatus.OK and self.revision:
            return self.revision
        if self.status == ResultStatus.ANONYMOUS:
            return ANONYMOUS_SENTINEL
        return FAILURE_SENTINEL

    def __str__(self) -> str:
        return self.sentinel


@dataclass(frozen=True)
class HistoryEntry:
    """Display projection of a revision."""

    timestamp: str
    message: str
    revision: str = ""

    def __str__(self) -> str:
        return f"{self.timestamp}|{self.message}"


class VcrConfig(BaseModel):
    """Versioning configuration."""

    author_name: str = "VCR Bot"
    author_email: str = "bot@example.com"
    init_message: str = "Initialized"
    ignore_file: str = ".qignore"

    model_config = {"extra": "forbid"}


class StorageConfig(BaseModel):
    """Local directory and remote target of a workspace."""

    local_dir: Path | None = None
    remote_url: str | None = None
    storage_root: Path = Field(default_factory=lambda: Path(STORAGE_ROOT_DEFAULT))

    model_config = {"extra": "forbid"}

    @classmethod
    def for_local(cls, local_dir: str | Path, remote_url: str) -> "StorageConfig":
        """Create configuration for an existing local directory.

        Args:
            local_dir: Local working directory.
            remote_url: Base URL archives are pushed to.

        Returns:
            StorageConfig with an absolute local_dir.

        Raises:
            ConfigError: If the directory does not exist.
        """
        path = Path(local_dir).resolve()
        if not path.is_dir():
            raise ConfigError(f"directory does not exist: {path}")
        return cls(local_dir=path, remote_url=remote_url)


def load_storage_config() -> StorageConfig:
    """Load storage configuration from the environment.

    Returns:
        StorageConfig whose storage_root comes from ``STORAGE_ROOT``.
    """
    root = os.environ.get(STORAGE_ROOT_ENV_KEY) or STORAGE_ROOT_DEFAULT
    return StorageConfig(storage_root=Path(root))
