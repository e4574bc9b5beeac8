"""Configuration manager with temporary overrides."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from ..config import LumixConfig
from ..config import get_config as _get_global_config

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


class ConfigManager:
    """Configuration manager with context support."""

    def __init__(self, config_path: Path | None = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to config file

        """
        self._config = LumixConfig.load_from_file(config_path) if config_path else _get_global_config()
        self._overrides: dict[str, Any] = {}
        self._context_stack: list[dict[str, Any]] = []

    @property
    def config(self) -> LumixConfig:
        """Get the base configuration."""
        return self._config

    def get_value(self, key_path: str, default: object = None) -> object:
        """Get configuration value with override support."""
        if key_path in self._overrides:
            return self._overrides[key_path]

        try:
            value = self._config
            for part in key_path.split("."):
                value = getattr(value, part)
        except AttributeError:
            return default
        else:
            return value

    def set_override(self, key_path: str, value: object) -> None:
        """Set a temporary configuration override."""
        self._overrides[key_path] = value

    def push_context(self, overrides: dict[str, Any]) -> None:
        """Push a new configuration context."""
        self._context_stack.append(self._overrides.copy())
        self._overrides.update(overrides)

    def pop_context(self) -> None:
        """Pop the current configuration context."""
        if self._context_stack:
            self._overrides = self._context_stack.pop()

    def effective_config(self) -> LumixConfig:
        """Return a copy of the configuration with the binary overrides applied."""
        binary = replace(
            self._config.binary,
            system_name=self.get_value("binary.system_name", self._config.binary.system_name),
            bin_dir=self.get_value("binary.bin_dir", self._config.binary.bin_dir),
            use_bundled=self.get_value("binary.use_bundled", self._config.binary.use_bundled),
        )
        return replace(self._config, binary=binary)


class ConfigContext:
    """Context manager for temporary configuration changes."""

    def __init__(self, config_manager: ConfigManager, overrides: dict[str, Any]) -> None:
        self.config_manager = config_manager
        self.overrides = overrides

    def __enter__(self) -> ConfigManager:
        """Enter the configuration context."""
        self.config_manager.push_context(self.overrides)
        return self.config_manager

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Exit the configuration context."""
        self.config_manager.pop_context()


def with_config_overrides(config_manager: ConfigManager, **overrides: object) -> ConfigContext:
    """Create a context with configuration overrides."""
    return ConfigContext(config_manager, overrides)
