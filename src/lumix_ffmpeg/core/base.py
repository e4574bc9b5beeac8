"""Base types and the error hierarchy for ffmpeg conversions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ConvertOptions:
    """
    Audio conversion options.

    Unset fields (``None``) are replaced by each conversion's own default.
    """

    sample_rate: int | None = None  # Hz
    channels: int | None = None
    bitrate: int | None = None  # kbps


@dataclass
class VideoOptions:
    """Video transcoding options; only set fields reach the command line."""

    bitrate: int | None = None  # kbps
    width: int | None = None
    height: int | None = None
    fps: float | None = None


@dataclass
class Mp4Options:
    """Web delivery MP4 options."""

    crf: int | None = None
    preset: str | None = None


@dataclass
class FrameOptions:
    """Frame extraction options."""

    fps: float | None = None


@dataclass
class ConvertResult:
    """Result of a conversion whose output file was verified to exist."""

    output: Path


class FFmpegKitError(Exception):
    """Base exception for lumix-ffmpeg errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause


class InputFileMissingError(FFmpegKitError):
    """The input file of a conversion does not exist."""


class OutputNotProducedError(FFmpegKitError):
    """ffmpeg exited successfully but the declared output is missing."""


class BinaryNotFoundError(FFmpegKitError):
    """Neither a system nor a bundled ffmpeg executable is usable."""


class ProcessSpawnError(FFmpegKitError):
    """The ffmpeg process could not be started."""


class FFmpegError(FFmpegKitError):
    """ffmpeg exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class InstallError(FFmpegKitError):
    """The binary installer could not fetch a release archive."""
