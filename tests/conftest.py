"""Pytest fixtures and configuration."""

import gc
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from git import Actor

from iterspace.workspace.versioned import VersionedWorkspace


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir).resolve()
    finally:
        # Clean up any git objects that might be holding file locks
        gc.collect()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def author() -> Actor:
    """Commit identity used by engine tests."""
    return Actor("Test User", "test@example.com")


@pytest.fixture
def versioned(temp_dir: Path) -> VersionedWorkspace:
    """Create a normal-mode versioned workspace with one tracked file."""
    (temp_dir / "f1.txt").write_text("init", encoding="utf-8")
    return VersionedWorkspace("tester", temp_dir)
