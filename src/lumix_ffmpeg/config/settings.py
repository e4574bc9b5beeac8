"""Configuration management for lumix-ffmpeg."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_RELEASE_API_URL,
    DEFAULT_USER_AGENT,
)

LOG = logging.getLogger(__name__)


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: LumixConfig | None = None

    @classmethod
    def get_instance(cls) -> LumixConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            config_path = Path.cwd() / "config.yaml"
            if config_path.exists():
                cls._instance = LumixConfig.load_from_file(config_path)
            else:
                cls._instance = LumixConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


def _default_fallback_urls() -> dict[str, str]:
    base = "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest"
    return {
        "win32-x64": f"{base}/ffmpeg-master-latest-win64-gpl-shared.zip",
        "darwin-arm64": "https://evermeet.cx/ffmpeg/ffmpeg-8.0.7z",
        "linux-x64": f"{base}/ffmpeg-master-latest-linux64-gpl.tar.xz",
    }


def _default_asset_matchers() -> dict[str, list[str]]:
    return {
        "win32-x64": ["win64", "windows", "win64-gpl", "win64-shared"],
        "linux-x64": ["linux64", "linux64-gpl"],
        "darwin-arm64": ["macos64", "darwin-arm64", "mac", "osx"],
    }


@dataclass
class BinaryConfig:
    """Where to look for the ffmpeg executable."""

    system_name: str = "ffmpeg"
    bin_dir: Path | None = None  # None means <package>/binaries/bin
    use_bundled: bool = True
    version_timeout: float = 10.0


@dataclass
class InstallConfig:
    """Binary installer settings."""

    release_api_url: str = DEFAULT_RELEASE_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    fallback_urls: dict[str, str] = field(default_factory=_default_fallback_urls)
    asset_matchers: dict[str, list[str]] = field(default_factory=_default_asset_matchers)


@dataclass
class GlobalConfig:
    """Global settings."""

    log_level: str = "INFO"


@dataclass
class LumixConfig:
    """Main configuration class."""

    binary: BinaryConfig = field(default_factory=BinaryConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> LumixConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            return cls._from_dict(data)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> LumixConfig:
        """Create config from dictionary."""
        if not isinstance(data, dict):
            msg = f"Expected a mapping at the top level, got {type(data).__name__}"
            raise TypeError(msg)

        return cls(
            binary=cls._parse_binary_config(data.get("binary") or {}),
            install=cls._parse_install_config(data.get("install") or {}),
            global_=cls._parse_global_config(data.get("global") or {}),
        )

    @classmethod
    def _parse_binary_config(cls, binary_data: dict[str, Any]) -> BinaryConfig:
        """Parse binary lookup configuration."""
        bin_dir = binary_data.get("bin_dir")
        return BinaryConfig(
            system_name=str(binary_data.get("system_name", "ffmpeg")),
            bin_dir=Path(bin_dir).expanduser() if bin_dir else None,
            use_bundled=bool(binary_data.get("use_bundled", True)),
            version_timeout=float(binary_data.get("version_timeout", 10.0)),
        )

    @classmethod
    def _parse_install_config(cls, install_data: dict[str, Any]) -> InstallConfig:
        """Parse installer configuration."""
        fallback_urls = _default_fallback_urls()
        fallback_urls.update(install_data.get("fallback_urls") or {})

        asset_matchers = _default_asset_matchers()
        for key, matchers in (install_data.get("asset_matchers") or {}).items():
            if isinstance(matchers, list):
                asset_matchers[key] = [str(m).lower() for m in matchers]
            else:
                LOG.warning("Ignoring asset matchers for '%s': expected a list", key)

        return InstallConfig(
            release_api_url=install_data.get("release_api_url", DEFAULT_RELEASE_API_URL),
            user_agent=install_data.get("user_agent", DEFAULT_USER_AGENT),
            max_redirects=int(install_data.get("max_redirects", DEFAULT_MAX_REDIRECTS)),
            timeout=float(install_data.get("timeout", DEFAULT_DOWNLOAD_TIMEOUT)),
            chunk_size=int(install_data.get("chunk_size", DEFAULT_CHUNK_SIZE)),
            fallback_urls=fallback_urls,
            asset_matchers=asset_matchers,
        )

    @classmethod
    def _parse_global_config(cls, global_data: dict[str, Any]) -> GlobalConfig:
        """Parse global configuration."""
        log_level = str(global_data.get("log_level", "INFO")).upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            LOG.warning("Invalid log level '%s'. Using 'INFO'.", log_level)
            log_level = "INFO"
        return GlobalConfig(log_level=log_level)


def get_config() -> LumixConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
