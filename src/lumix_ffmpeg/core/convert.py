"""Helpers shared by the audio and video conversions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .base import ConvertResult, InputFileMissingError, OutputNotProducedError
from .ffmpeg import FFmpegRunner

if TYPE_CHECKING:
    from collections.abc import Sequence

LOG = logging.getLogger(__name__)


def ensure_input(input_path: Path | str) -> Path:
    """Raise InputFileMissingError unless ``input_path`` exists."""
    path = Path(input_path)
    if not path.exists():
        msg = f"Input file not found: {path}"
        raise InputFileMissingError(msg, file_path=path)
    return path


def run_and_return(
    output_path: Path | str,
    args: Sequence[str],
    runner: FFmpegRunner | None = None,
) -> ConvertResult:
    """Run ffmpeg with ``args`` and verify that ``output_path`` was written."""
    output = Path(output_path)
    (runner or FFmpegRunner()).run(args)

    if not output.exists():
        msg = f"Output not produced: {output}"
        raise OutputNotProducedError(msg, file_path=output)

    LOG.info("Wrote %s", output)
    return ConvertResult(output=output)
