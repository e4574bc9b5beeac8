"""lumix-ffmpeg - run common ffmpeg conversions from Python."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "Convenience layer for converting media with the ffmpeg executable"

# Public API exports
from .audio import (
    audio_to_aac,
    audio_to_flac,
    audio_to_ogg,
    audio_to_wav,
    build_audio_to_aac_args,
    build_audio_to_flac_args,
    build_audio_to_ogg_args,
    build_audio_to_wav_args,
    build_extract_audio_to_mp3_args,
    build_pcm_to_mp3_args,
    extract_audio_to_mp3,
    pcm_to_mp3,
)
from .binaries import bundled_ffmpeg_path
from .config import LumixConfig, get_config
from .core import (
    BinaryNotFoundError,
    BinaryResolver,
    ConfigManager,
    ConvertOptions,
    ConvertResult,
    FFmpegError,
    FFmpegKitError,
    FFmpegRunner,
    FrameOptions,
    InputFileMissingError,
    InstallError,
    Mp4Options,
    OutputNotProducedError,
    ProcessSpawnError,
    VideoOptions,
    resolve_ffmpeg_binary,
    run_ffmpeg,
    with_config_overrides,
)
from .video import (
    build_extract_frames_args,
    build_remux_args,
    build_to_mp4_args,
    build_video_to_h264_mp4_args,
    build_video_to_vp9_webm_args,
    extract_frames,
    remux,
    to_mp4,
    video_to_h264_mp4,
    video_to_vp9_webm,
)

__all__ = [
    # Configuration
    "ConfigManager",
    "LumixConfig",
    "get_config",
    "with_config_overrides",
    # Binary resolution and execution
    "BinaryResolver",
    "FFmpegRunner",
    "bundled_ffmpeg_path",
    "resolve_ffmpeg_binary",
    "run_ffmpeg",
    # Conversions
    "audio_to_aac",
    "audio_to_flac",
    "audio_to_ogg",
    "audio_to_wav",
    "extract_audio_to_mp3",
    "extract_frames",
    "pcm_to_mp3",
    "remux",
    "to_mp4",
    "video_to_h264_mp4",
    "video_to_vp9_webm",
    # Argument builders
    "build_audio_to_aac_args",
    "build_audio_to_flac_args",
    "build_audio_to_ogg_args",
    "build_audio_to_wav_args",
    "build_extract_audio_to_mp3_args",
    "build_extract_frames_args",
    "build_pcm_to_mp3_args",
    "build_remux_args",
    "build_to_mp4_args",
    "build_video_to_h264_mp4_args",
    "build_video_to_vp9_webm_args",
    # Options and results
    "ConvertOptions",
    "ConvertResult",
    "FrameOptions",
    "Mp4Options",
    "VideoOptions",
    # Exceptions
    "BinaryNotFoundError",
    "FFmpegError",
    "FFmpegKitError",
    "InputFileMissingError",
    "InstallError",
    "OutputNotProducedError",
    "ProcessSpawnError",
]
