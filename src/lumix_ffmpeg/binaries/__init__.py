"""Location of the ffmpeg binary fetched by the installer."""

from __future__ import annotations

import sys
from pathlib import Path

DEFAULT_BIN_DIR = Path(__file__).resolve().parent / "bin"


def binary_filename() -> str:
    """Return the platform specific executable name."""
    return "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"


def bundled_ffmpeg_path(bin_dir: Path | None = None) -> Path | None:
    """Return the installed bundled binary, or None when it was never installed."""
    binary = (bin_dir or DEFAULT_BIN_DIR) / binary_filename()
    return binary if binary.is_file() else None


__all__ = ["DEFAULT_BIN_DIR", "binary_filename", "bundled_ffmpeg_path"]
