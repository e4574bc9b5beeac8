"""FFmpeg process execution."""

from __future__ import annotations

import logging
import subprocess
import time
from typing import TYPE_CHECKING

from ..config import get_config
from ..config.constants import ENCODERS_LIST_MINIMUM_PARTS
from .base import FFmpegError, ProcessSpawnError
from .resolver import BinaryResolver

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

LOG = logging.getLogger(__name__)


class FFmpegRunner:
    """
    Spawn ffmpeg and collect its diagnostic output.

    Pass ``binary`` to pin the executable (resolved once by the caller).
    Without it the ``resolver`` is consulted on every run. The resolver is
    built from the global configuration only when it is first needed.
    """

    def __init__(
        self,
        binary: str | None = None,
        resolver: BinaryResolver | None = None,
        *,
        probe_timeout: float | None = None,
    ) -> None:
        self.binary = binary
        self._resolver = resolver
        self._probe_timeout = probe_timeout
        self._available_encoders: dict[str, bool] | None = None

    @property
    def resolver(self) -> BinaryResolver:
        """Resolver used when no binary is pinned."""
        if self._resolver is None:
            self._resolver = BinaryResolver.from_config(get_config())
        return self._resolver

    @property
    def probe_timeout(self) -> float:
        """Timeout in seconds for ``-version`` and ``-encoders`` queries."""
        if self._probe_timeout is not None:
            return self._probe_timeout
        return self.resolver.version_timeout

    def resolve_binary(self) -> str:
        """Return the pinned binary or resolve a fresh one."""
        if self.binary:
            return self.binary
        return self.resolver.resolve()

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | str | None = None,
        progress_callback: Callable[[str], None] | None = None,
    ) -> str:
        """
        Run ffmpeg with ``args`` and return everything it wrote to stderr.

        Standard input is discarded. Stderr is read line by line while the
        process runs; each line is logged at DEBUG and handed to
        ``progress_callback`` when one is given.

        Raises:
            BinaryNotFoundError: if no executable can be resolved
            ProcessSpawnError: if the process cannot be started
            FFmpegError: if ffmpeg exits with a non-zero status

        """
        command = [self.resolve_binary(), *args]
        LOG.info("Running FFmpeg command: %s", " ".join(command))
        start_time = time.time()

        try:
            proc = subprocess.Popen(  # noqa: S603
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                cwd=cwd,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            msg = f"Failed to start ffmpeg ({command[0]}): {e}"
            raise ProcessSpawnError(msg, cause=e) from e

        lines: list[str] = []
        with proc:
            if proc.stderr is not None:
                for line in proc.stderr:
                    lines.append(line)
                    LOG.debug("ffmpeg: %s", line.rstrip())
                    if progress_callback is not None:
                        progress_callback(line.rstrip("\n"))
            return_code = proc.wait()

        stderr = "".join(lines)
        LOG.debug("FFmpeg command completed in %.2fs", time.time() - start_time)

        if return_code != 0:
            msg = f"ffmpeg failed (code {return_code}): {stderr}"
            raise FFmpegError(msg, command=command, return_code=return_code, stderr=stderr)
        return stderr

    def version(self) -> str | None:
        """Return the first line of ``ffmpeg -version``, or None if it cannot be read."""
        try:
            result = subprocess.run(  # noqa: S603
                [self.resolve_binary(), "-version"],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.probe_timeout,
                encoding="utf-8",
                errors="replace",
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            LOG.warning("Failed to read ffmpeg version: %s", e)
            return None
        first_line, _, _ = result.stdout.partition("\n")
        return first_line.strip() or None

    def get_available_encoders(self) -> dict[str, bool]:
        """Get the encoders compiled into the resolved ffmpeg build."""
        if self._available_encoders is not None:
            return self._available_encoders

        try:
            result = subprocess.run(  # noqa: S603
                [self.resolve_binary(), "-hide_banner", "-encoders"],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.probe_timeout,
                encoding="utf-8",
                errors="replace",
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            LOG.warning("Failed to get encoder list: %s", e)
            return {}

        encoders = {}
        for line in result.stdout.split("\n"):
            # Encoder lines start with " V" for video or " A" for audio
            if line.startswith((" V", " A")):
                parts = line.split()
                if len(parts) >= ENCODERS_LIST_MINIMUM_PARTS and parts[1] != "=":
                    encoders[parts[1]] = True

        self._available_encoders = encoders
        LOG.debug("Found %d available encoders", len(encoders))
        return encoders

    def is_encoder_available(self, encoder: str) -> bool:
        """Check if a specific encoder is available."""
        return self.get_available_encoders().get(encoder, False)


def run_ffmpeg(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    binary: str | None = None,
) -> str:
    """Run ffmpeg once with a default runner and return its stderr output."""
    return FFmpegRunner(binary=binary).run(args, cwd=cwd)
