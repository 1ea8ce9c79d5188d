"""iterspace - Branch-per-iteration versioning of a working directory.

A permanent main line plus short-lived alternate lines spawned from a
point in history, eventually promoted back into main.
"""

from iterspace.core.config import Config
from iterspace.core.exceptions import (
    CheckoutError,
    IterspaceError,
    NotInitializedError,
    OperationError,
    PurgeError,
    ReferenceNotFoundError,
    RewriteError,
    SetupError,
)
from iterspace.core.types import (
    ANONYMOUS_IDENTITY,
    ANONYMOUS_SENTINEL,
    FAILURE_SENTINEL,
    MAIN_BRANCH,
    CommitResult,
    HistoryEntry,
    ResultStatus,
    StorageConfig,
    VcrConfig,
    WorkspaceMode,
    WorkspaceState,
    load_storage_config,
)
from iterspace.packaging.archive import build_archive, extract_archive
from iterspace.workspace.files import Workspace
from iterspace.workspace.ignore import IgnoreMatcher
from iterspace.workspace.versioned import VersionedWorkspace

__version__ = "0.1.0"

__all__ = [
    # Core types
    "ANONYMOUS_IDENTITY",
    "ANONYMOUS_SENTINEL",
    "FAILURE_SENTINEL",
    "MAIN_BRANCH",
    "CommitResult",
    "Config",
    "HistoryEntry",
    "ResultStatus",
    "StorageConfig",
    "VcrConfig",
    "WorkspaceMode",
    "WorkspaceState",
    "load_storage_config",
    # Errors
    "CheckoutError",
    "IterspaceError",
    "NotInitializedError",
    "OperationError",
    "PurgeError",
    "ReferenceNotFoundError",
    "RewriteError",
    "SetupError",
    # Versioning
    "VersionedWorkspace",
    # Files and packaging
    "IgnoreMatcher",
    "Workspace",
    "build_archive",
    "extract_archive",
]


def main() -> None:
    """CLI entry point."""
    import sys

    from iterspace.cli import main as cli_main

    sys.exit(cli_main())
