"""Configuration management for iterspace."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from iterspace.core.exceptions import ConfigError
from iterspace.core.types import StorageConfig, VcrConfig, load_storage_config

DEFAULT_CONFIG_FILENAME = "iterspace.json"


class Config:
    """Configuration manager for iterspace."""

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file. If None, uses default.
        """
        self._config_path = config_path
        self._config_data: dict[str, Any] = {}

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from file.

        Args:
            config_path: Path to configuration file.

        Returns:
            Config instance with loaded configuration.
        """
        instance = cls(config_path)
        instance.load()
        return instance

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        instance = cls()
        instance._config_data = data
        return instance

    @classmethod
    def for_workdir(cls, workdir: Path) -> "Config":
        """Load ``iterspace.json`` from a working directory if present."""
        return cls.from_file(Path(workdir) / DEFAULT_CONFIG_FILENAME)

    def load(self) -> None:
        """Load configuration from file.

        Raises:
            ConfigError: If the file is not valid JSON.
        """
        if self._config_path is None or not self._config_path.exists():
            return

        with open(self._config_path, encoding="utf-8") as f:
            try:
                self._config_data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"Invalid config file {self._config_path}: {e}") from e

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file.

        Args:
            path: Path to save configuration. Uses config_path if None.
        """
        save_path = path or self._config_path
        if save_path is None:
            raise ValueError("No path specified for saving configuration")

        save_path.parent.mkdir(parents=True, exist_ok=True)
        with open(save_path, "w", encoding="utf-8") as f:
            json.dump(self._config_data, f, indent=2, default=str)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        keys = key.split(".")
        value = self._config_data
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value (supports dot notation)."""
        keys = key.split(".")
        data = self._config_data
        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            data = data[k]
        data[keys[-1]] = value

    def to_vcr_config(self) -> VcrConfig:
        """Convert the ``vcr`` section to VcrConfig.

        Raises:
            ConfigError: If the section holds unknown or invalid keys.
        """
        try:
            return VcrConfig(**self.get("vcr", {}))
        except ValidationError as e:
            raise ConfigError(f"Invalid vcr configuration: {e}") from e

    def to_storage_config(self) -> StorageConfig:
        """Convert the ``storage`` section to StorageConfig.

        Values missing from the file fall back to the environment.
        """
        storage = load_storage_config()
        root = self.get("storage.storage_root")
        remote_url = self.get("storage.remote_url")
        return StorageConfig(
            local_dir=storage.local_dir,
            remote_url=remote_url if remote_url else storage.remote_url,
            storage_root=Path(root) if root else storage.storage_root,
        )

    @property
    def data(self) -> dict[str, Any]:
        """Get raw configuration data."""
        return self._config_data
