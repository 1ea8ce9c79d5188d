"""Tests for iterspace.core.types module."""

from pathlib import Path

import pytest

from iterspace.core.exceptions import ConfigError
from iterspace.core.types import (
    ANONYMOUS_SENTINEL,
    FAILURE_SENTINEL,
    CommitResult,
    HistoryEntry,
    ResultStatus,
    StorageConfig,
    VcrConfig,
    load_storage_config,
)


class TestCommitResult:
    """Tests for CommitResult."""

    def test_success(self) -> None:
        """Test successful result exposes the revision."""
        result = CommitResult.success("abc123")
        assert result.ok is True
        assert result.status == ResultStatus.OK
        assert result.sentinel == "abc123"
        assert str(result) == "abc123"

    def test_anonymous_sentinel(self) -> None:
        """Test anonymous result maps to '?'."""
        result = CommitResult.anonymous()
        assert result.ok is False
        assert result.sentinel == ANONYMOUS_SENTINEL == "?"

    def test_failure_sentinels(self) -> None:
        """Test failure and not-initialized share the empty sentinel."""
        assert CommitResult.failed("boom").sentinel == FAILURE_SENTINEL == ""
        assert CommitResult.not_initialized().sentinel == FAILURE_SENTINEL
        assert CommitResult.failed("boom").reason == "boom"

    def test_anonymous_distinct_from_failure(self) -> None:
        """Test the two sentinels are distinct."""
        assert CommitResult.anonymous().sentinel != CommitResult.failed("x").sentinel


class TestHistoryEntry:
    """Tests for HistoryEntry."""

    def test_display_form(self) -> None:
        """Test string form joins timestamp and message."""
        entry = HistoryEntry(timestamp="2024-01-01 12:00", message="first")
        assert str(entry) == "2024-01-01 12:00|first"


class TestVcrConfig:
    """Tests for VcrConfig."""

    def test_default_values(self) -> None:
        """Test default identity and messages."""
        config = VcrConfig()
        assert config.author_name == "VCR Bot"
        assert config.author_email == "bot@example.com"
        assert config.init_message == "Initialized"
        assert config.ignore_file == ".qignore"

    def test_extra_forbidden(self) -> None:
        """Test unknown fields are rejected."""
        with pytest.raises(ValueError):
            VcrConfig(unknown="x")


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_load_default_root(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default storage root when env is unset."""
        monkeypatch.delenv("STORAGE_ROOT", raising=False)
        config = load_storage_config()
        assert config.storage_root == Path("/data/storage")

    def test_load_root_from_env(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        """Test storage root from environment."""
        monkeypatch.setenv("STORAGE_ROOT", str(temp_dir))
        assert load_storage_config().storage_root == temp_dir

    def test_for_local(self, temp_dir: Path) -> None:
        """Test creating config for an existing directory."""
        config = StorageConfig.for_local(temp_dir, "http://test-remote")
        assert config.local_dir == temp_dir
        assert config.remote_url == "http://test-remote"

    def test_for_local_missing_directory(self, temp_dir: Path) -> None:
        """Test missing directory is rejected."""
        with pytest.raises(ConfigError, match="directory does not exist"):
            StorageConfig.for_local(temp_dir / "missing", "http://test-remote")
