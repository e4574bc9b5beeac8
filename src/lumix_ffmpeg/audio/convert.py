"""Audio conversions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config.constants import (
    DEFAULT_AAC_BITRATE,
    DEFAULT_CHANNELS,
    DEFAULT_MP3_BITRATE,
    DEFAULT_OGG_BITRATE,
    DEFAULT_SAMPLE_RATE,
    PCM_DEFAULT_SAMPLE_RATE,
    PCM_INPUT_FORMAT,
    PCM_OUTPUT_CHANNELS,
    PCM_OUTPUT_SAMPLE_RATE,
)
from ..core.base import ConvertOptions, ConvertResult
from ..core.convert import ensure_input, run_and_return

if TYPE_CHECKING:
    from pathlib import Path

    from ..core.ffmpeg import FFmpegRunner

LOG = logging.getLogger(__name__)


def _pick(value: int | None, default: int) -> int:
    return default if value is None else value


def build_pcm_to_mp3_args(
    input_path: Path | str, output_path: Path | str, options: ConvertOptions | None = None
) -> list[str]:
    """
    Build ffmpeg arguments for raw signed 16-bit little endian PCM to MP3.

    Args:
        input_path: Raw PCM file
        output_path: MP3 file to write
        options: Input sample rate (default 48000), input channels (default 2)
            and bitrate in kbps (default 192). The output is always 48 kHz stereo.

    Returns:
        ffmpeg arguments, without the executable

    """
    opts = options or ConvertOptions()
    return [
        "-f",
        PCM_INPUT_FORMAT,
        "-ar",
        str(_pick(opts.sample_rate, PCM_DEFAULT_SAMPLE_RATE)),
        "-ac",
        str(_pick(opts.channels, DEFAULT_CHANNELS)),
        "-i",
        str(input_path),
        "-acodec",
        "libmp3lame",
        "-ar",
        str(PCM_OUTPUT_SAMPLE_RATE),
        "-ac",
        str(PCM_OUTPUT_CHANNELS),
        "-ab",
        f"{_pick(opts.bitrate, DEFAULT_MP3_BITRATE)}k",
        str(output_path),
        "-y",
    ]


def build_audio_to_wav_args(
    input_path: Path | str, output_path: Path | str, options: ConvertOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments for 16-bit PCM WAV output (44100 Hz, stereo by default)."""
    opts = options or ConvertOptions()
    return [
        "-i",
        str(input_path),
        "-ar",
        str(_pick(opts.sample_rate, DEFAULT_SAMPLE_RATE)),
        "-ac",
        str(_pick(opts.channels, DEFAULT_CHANNELS)),
        "-f",
        "wav",
        str(output_path),
        "-y",
    ]


def build_audio_to_flac_args(
    input_path: Path | str, output_path: Path | str, options: ConvertOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments for FLAC output; the bitrate is only passed when set."""
    opts = options or ConvertOptions()
    args = [
        "-i",
        str(input_path),
        "-ar",
        str(_pick(opts.sample_rate, DEFAULT_SAMPLE_RATE)),
        "-ac",
        str(_pick(opts.channels, DEFAULT_CHANNELS)),
    ]
    if opts.bitrate:
        args.extend(["-b:a", f"{opts.bitrate}k"])
    args.extend([str(output_path), "-y"])
    return args


def _build_encoded_audio_args(
    input_path: Path | str,
    output_path: Path | str,
    codec: str,
    default_bitrate: int,
    options: ConvertOptions | None,
) -> list[str]:
    opts = options or ConvertOptions()
    return [
        "-i",
        str(input_path),
        "-c:a",
        codec,
        "-b:a",
        f"{_pick(opts.bitrate, default_bitrate)}k",
        "-ar",
        str(_pick(opts.sample_rate, DEFAULT_SAMPLE_RATE)),
        "-ac",
        str(_pick(opts.channels, DEFAULT_CHANNELS)),
        str(output_path),
        "-y",
    ]


def build_audio_to_aac_args(
    input_path: Path | str, output_path: Path | str, options: ConvertOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments for AAC output (128 kbps, 44100 Hz, stereo by default)."""
    return _build_encoded_audio_args(input_path, output_path, "aac", DEFAULT_AAC_BITRATE, options)


def build_audio_to_ogg_args(
    input_path: Path | str, output_path: Path | str, options: ConvertOptions | None = None
) -> list[str]:
    """Build ffmpeg arguments for Ogg Vorbis output (128 kbps, 44100 Hz, stereo by default)."""
    return _build_encoded_audio_args(input_path, output_path, "libvorbis", DEFAULT_OGG_BITRATE, options)


def build_extract_audio_to_mp3_args(
    input_path: Path | str, output_path: Path | str, bitrate: int = DEFAULT_MP3_BITRATE
) -> list[str]:
    """Build ffmpeg arguments that pull the audio track of a video into an MP3."""
    return [
        "-i",
        str(input_path),
        "-q:a",
        "0",
        "-map",
        "a",
        "-ab",
        f"{bitrate}k",
        str(output_path),
        "-y",
    ]


def pcm_to_mp3(
    input_path: Path | str,
    output_path: Path | str,
    options: ConvertOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert raw PCM (s16le) to MP3."""
    ensure_input(input_path)
    return run_and_return(output_path, build_pcm_to_mp3_args(input_path, output_path, options), runner)


def audio_to_wav(
    input_path: Path | str,
    output_path: Path | str,
    options: ConvertOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert audio to WAV (PCM 16)."""
    ensure_input(input_path)
    return run_and_return(output_path, build_audio_to_wav_args(input_path, output_path, options), runner)


def audio_to_flac(
    input_path: Path | str,
    output_path: Path | str,
    options: ConvertOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert audio to FLAC."""
    ensure_input(input_path)
    return run_and_return(output_path, build_audio_to_flac_args(input_path, output_path, options), runner)


def audio_to_aac(
    input_path: Path | str,
    output_path: Path | str,
    options: ConvertOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert audio to AAC (in an MP4 container when the output ends in .m4a/.mp4)."""
    ensure_input(input_path)
    return run_and_return(output_path, build_audio_to_aac_args(input_path, output_path, options), runner)


def audio_to_ogg(
    input_path: Path | str,
    output_path: Path | str,
    options: ConvertOptions | None = None,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Convert audio to Ogg Vorbis."""
    ensure_input(input_path)
    return run_and_return(output_path, build_audio_to_ogg_args(input_path, output_path, options), runner)


def extract_audio_to_mp3(
    input_path: Path | str,
    output_path: Path | str,
    bitrate: int = DEFAULT_MP3_BITRATE,
    *,
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Extract the audio track from a video to MP3."""
    ensure_input(input_path)
    return run_and_return(output_path, build_extract_audio_to_mp3_args(input_path, output_path, bitrate), runner)
