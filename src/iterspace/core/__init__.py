"""Core layer for iterspace."""

from iterspace.core.config import Config
from iterspace.core.types import (
    CommitResult,
    HistoryEntry,
    ResultStatus,
    StorageConfig,
    VcrConfig,
    WorkspaceMode,
    WorkspaceState,
)

__all__ = [
    "CommitResult",
    "Config",
    "HistoryEntry",
    "ResultStatus",
    "StorageConfig",
    "VcrConfig",
    "WorkspaceMode",
    "WorkspaceState",
]
