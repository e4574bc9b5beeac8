"""Core abstractions: errors, binary resolution and process execution."""

from .base import (
    BinaryNotFoundError,
    ConvertOptions,
    ConvertResult,
    FFmpegError,
    FFmpegKitError,
    FrameOptions,
    InputFileMissingError,
    InstallError,
    Mp4Options,
    OutputNotProducedError,
    ProcessSpawnError,
    VideoOptions,
)
from .config import ConfigManager, with_config_overrides
from .convert import ensure_input, run_and_return
from .ffmpeg import FFmpegRunner, run_ffmpeg
from .resolver import BinaryResolver, resolve_ffmpeg_binary

__all__ = [
    "BinaryNotFoundError",
    "BinaryResolver",
    "ConfigManager",
    "ConvertOptions",
    "ConvertResult",
    "FFmpegError",
    "FFmpegKitError",
    "FFmpegRunner",
    "FrameOptions",
    "InputFileMissingError",
    "InstallError",
    "Mp4Options",
    "OutputNotProducedError",
    "ProcessSpawnError",
    "VideoOptions",
    "ensure_input",
    "resolve_ffmpeg_binary",
    "run_and_return",
    "run_ffmpeg",
    "with_config_overrides",
]
