"""Configuration management for lumix-ffmpeg."""

from __future__ import annotations

from .constants import *  # noqa: F403
from .settings import BinaryConfig, GlobalConfig, InstallConfig, LumixConfig, get_config

__all__ = [
    "BinaryConfig",
    "GlobalConfig",
    "InstallConfig",
    "LumixConfig",
    "get_config",
]
