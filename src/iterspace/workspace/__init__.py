"""Workspace management layer for iterspace."""

from iterspace.workspace.files import Workspace
from iterspace.workspace.git import CommitInfo, GitManager
from iterspace.workspace.ignore import IgnoreMatcher
from iterspace.workspace.versioned import VersionedWorkspace

__all__ = [
    "CommitInfo",
    "GitManager",
    "IgnoreMatcher",
    "VersionedWorkspace",
    "Workspace",
]
