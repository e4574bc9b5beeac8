"""Video conversions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config.constants import H264_PRESET, MP4_DEFAULT_CRF, MP4_DEFAULT_PRESET
from ..core.base import ConvertResult, FrameOptions, Mp4Options, VideoOptions
from ..core.convert import ensure_input, run_and_return
from ..core.ffmpeg import FFmpegRunner

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


def _scale_filter(opts: VideoOptions) -> list[str]:
    # Scaling needs both dimensions
    if opts.width and opts.height:
        return ["-vf", f"scale={opts.width}:{opts.height}"]
    return []


def build_video_to_h264_mp4_args(
    input_path: Path | str, output_path: Path | str, options: VideoOptions | None = None
) -> list[str]:
    """
    Build ffmpeg arguments for H.264/AAC MP4 output.

    Bitrate (kbps), scaling and frame rate are only added when set.
    """
    opts = options or VideoOptions()
    args = ["-i", str(input_path), "-c:v", "libx264", "-preset", H264_PRESET]
    if opts.bitrate:
        args.extend(["-b:v", f"{opts.bitrate}k"])
    args.extend(_scale_filter(opts))
    if opts.fps:
        args.extend(["-r", str(opts.fps)])
    args.extend(["-c:a", "aac", str(output_path), "-y"])
    return args


def build_video_to_vp9_webm_args(
    input_path: Path | str, output_path: Path | str, options: VideoOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments for VP9/Opus WebM output. Frame rate is ignored."""
    opts = options or VideoOptions()
    args = ["-i", str(input_path), "-c:v", "libvpx-vp9"]
    if opts.bitrate:
        args.extend(["-b:v", f"{opts.bitrate}k"])
    args.extend(_scale_filter(opts))
    args.extend(["-c:a", "libopus", str(output_path), "-y"])
    return args


def build_extract_frames_args(
    input_path: Path | str, frame_pattern: Path | str, options: FrameOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments that write frames to ``frame_pattern`` (e.g. ``frame_%04d.jpg``)."""
    opts = options or FrameOptions()
    args = ["-i", str(input_path)]
    if opts.fps:
        args.extend(["-r", str(opts.fps)])
    args.extend([str(frame_pattern), "-y"])
    return args


def build_remux_args(input_path: Path | str, output_path: Path | str) -> list[str]:
    """Build ffmpeg arguments that copy all streams into a new container."""
    return ["-i", str(input_path), "-c", "copy", str(output_path), "-y"]


def build_to_mp4_args(input_path: Path | str, output_path: Path | str, options: Mp4Options | None = None) -> list[str]:
    """Build ffmpeg arguments for web delivery MP4 (CRF 23, preset medium by default)."""
    opts = options or Mp4Options()
    crf = MP4_DEFAULT_CRF if opts.crf is None else opts.crf
    preset = opts.preset or MP4_DEFAULT_PRESET
    return [
        "-i",
        str(input_path),
        "-c:v",
        "libx264",
        "-crf",
        str(crf),
        "-preset",
        preset,
        "-c:a",
        "aac",
        str(output_path),
        "-y",
    ]


def video_to_h264_mp4(
    input_path: Path | str,
    output_path: Path | str,
    options: VideoOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Transcode video to H.264 MP4."""
    ensure_input(input_path)
    return run_and_return(output_path, build_video_to_h264_mp4_args(input_path, output_path, options), runner)


def video_to_vp9_webm(
    input_path: Path | str,
    output_path: Path | str,
    options: VideoOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Transcode video to VP9 WebM."""
    ensure_input(input_path)
    return run_and_return(output_path, build_video_to_vp9_webm_args(input_path, output_path, options), runner)


def extract_frames(
    input_path: Path | str,
    frame_pattern: Path | str,
    options: FrameOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> str:
    """
    Extract frames as images.

    The pattern should contain a numeric placeholder such as ``%d`` or
    ``%04d``. It is returned unchanged; no single output file is checked.
    """
    ensure_input(input_path)
    (runner or FFmpegRunner()).run(build_extract_frames_args(input_path, frame_pattern, options))
    LOG.info("Extracted frames to %s", frame_pattern)
    return str(frame_pattern)


def remux(
    input_path: Path | str,
    output_path: Path | str,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Remux input into a different container without re-encoding."""
    ensure_input(input_path)
    return run_and_return(output_path, build_remux_args(input_path, output_path), runner)


def to_mp4(
    input_path: Path | str,
    output_path: Path | str,
    options: Mp4Options | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert arbitrary input to MP4 using presets suited to web delivery."""
    ensure_input(input_path)
    return run_and_return(output_path, build_to_mp4_args(input_path, output_path, options), runner)
