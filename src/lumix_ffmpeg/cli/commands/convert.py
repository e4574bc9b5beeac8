"""Conversion CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...audio import (
    audio_to_aac,
    audio_to_flac,
    audio_to_ogg,
    audio_to_wav,
    extract_audio_to_mp3,
    pcm_to_mp3,
)
from ...config.constants import DEFAULT_MP3_BITRATE
from ...core import (
    BinaryResolver,
    ConvertOptions,
    FFmpegError,
    FFmpegKitError,
    FFmpegRunner,
    FrameOptions,
    Mp4Options,
    VideoOptions,
)
from ...video import extract_frames, remux, to_mp4, video_to_h264_mp4, video_to_vp9_webm

if TYPE_CHECKING:
    import argparse
    from collections.abc import Callable

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)

STDERR_TAIL_LINES = 10


@dataclass(frozen=True)
class Conversion:
    """A CLI conversion kind and the options type it takes."""

    func: Callable[..., Any]
    options: str  # "audio", "video", "mp4", "frames", "bitrate" or "none"
    help: str


CONVERSIONS: dict[str, Conversion] = {
    "pcm-to-mp3": Conversion(pcm_to_mp3, "audio", "Raw s16le PCM to MP3"),
    "wav": Conversion(audio_to_wav, "audio", "Audio to 16-bit WAV"),
    "flac": Conversion(audio_to_flac, "audio", "Audio to FLAC"),
    "aac": Conversion(audio_to_aac, "audio", "Audio to AAC"),
    "ogg": Conversion(audio_to_ogg, "audio", "Audio to Ogg Vorbis"),
    "h264": Conversion(video_to_h264_mp4, "video", "Video to H.264 MP4"),
    "vp9": Conversion(video_to_vp9_webm, "video", "Video to VP9 WebM"),
    "extract-audio": Conversion(extract_audio_to_mp3, "bitrate", "Audio track of a video to MP3"),
    "frames": Conversion(extract_frames, "frames", "Frames to images (OUTPUT is a pattern like frame_%04d.jpg)"),
    "remux": Conversion(remux, "none", "Change container without re-encoding"),
    "mp4": Conversion(to_mp4, "mp4", "Any input to web-ready MP4"),
}


class ConvertCommands:
    """Conversion command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize conversion commands handler."""
        self.config_manager = config_manager

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add conversion arguments to parser."""
        kinds = "\n".join(f"  {name:<14} {conv.help}" for name, conv in CONVERSIONS.items())
        parser.epilog = f"Conversion kinds:\n{kinds}"

        parser.add_argument("kind", choices=sorted(CONVERSIONS), help="Conversion to run")
        parser.add_argument("input", type=Path, help="Input file")
        parser.add_argument("output", type=Path, help="Output file (or frame pattern)")
        parser.add_argument("--sample-rate", type=int, help="Sample rate in Hz")
        parser.add_argument("--channels", type=int, help="Number of audio channels")
        parser.add_argument("--bitrate", "-b", type=int, help="Bitrate in kbps")
        parser.add_argument("--width", type=int, help="Output width (needs --height)")
        parser.add_argument("--height", type=int, help="Output height (needs --width)")
        parser.add_argument("--fps", type=float, help="Output frame rate")
        parser.add_argument("--crf", type=int, help="Constant rate factor for mp4")
        parser.add_argument("--preset", help="x264 preset for mp4")
        parser.add_argument("--binary", help="ffmpeg executable to use instead of resolving one")

    @staticmethod
    def build_call_args(kind: str, args: argparse.Namespace) -> tuple[Any, ...]:
        """Return the options argument(s) a conversion expects after input and output."""
        options = CONVERSIONS[kind].options
        if options == "audio":
            return (ConvertOptions(sample_rate=args.sample_rate, channels=args.channels, bitrate=args.bitrate),)
        if options == "video":
            return (VideoOptions(bitrate=args.bitrate, width=args.width, height=args.height, fps=args.fps),)
        if options == "mp4":
            return (Mp4Options(crf=args.crf, preset=args.preset),)
        if options == "frames":
            return (FrameOptions(fps=args.fps),)
        if options == "bitrate":
            return (args.bitrate or DEFAULT_MP3_BITRATE,)
        return ()

    def make_runner(self, binary: str | None) -> FFmpegRunner:
        """Resolve the executable once for this invocation."""
        resolver = BinaryResolver.from_config(self.config_manager.effective_config())
        if binary is None:
            binary = resolver.resolve()
        return FFmpegRunner(binary=binary, resolver=resolver)

    def handle_command(self, args: argparse.Namespace) -> int:
        """Handle conversion command execution."""
        conversion = CONVERSIONS.get(args.kind)
        if conversion is None:
            LOG.error("Unknown conversion: %s", args.kind)
            return 1

        if getattr(args, "dry_run", False):
            LOG.info("Dry run: would convert %s to %s (%s)", args.input, args.output, args.kind)
            return 0

        try:
            runner = self.make_runner(args.binary)
            result = conversion.func(args.input, args.output, *self.build_call_args(args.kind, args), runner=runner)
        except FFmpegError as e:
            tail = "\n".join((e.stderr or "").strip().splitlines()[-STDERR_TAIL_LINES:])
            LOG.error("ffmpeg exited with code %s converting %s:\n%s", e.return_code, args.input, tail)  # noqa: TRY400
            return 1
        except FFmpegKitError as e:
            LOG.error("%s", e)  # noqa: TRY400
            return 1

        output = result if isinstance(result, str) else result.output
        LOG.info("Converted %s -> %s", args.input, output)
        print(output)
        return 0
