"""Resolution of a usable ffmpeg executable."""

from __future__ import annotations

import logging
import subprocess
from functools import partial
from typing import TYPE_CHECKING

from ..binaries import bundled_ffmpeg_path
from ..config import get_config
from .base import BinaryNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ..config import LumixConfig

LOG = logging.getLogger(__name__)


class BinaryResolver:
    """
    Pick the ffmpeg executable to run.

    A system installation is tried first with a ``-version`` probe. When that
    fails the ``bundled`` strategy is asked for a path. Nothing is cached:
    every call to :meth:`resolve` probes again.
    """

    def __init__(
        self,
        system_name: str = "ffmpeg",
        bundled: Callable[[], Path | str | None] | None = bundled_ffmpeg_path,
        version_timeout: float = 10.0,
    ) -> None:
        self.system_name = system_name
        self.bundled = bundled
        self.version_timeout = version_timeout

    @classmethod
    def from_config(cls, config: LumixConfig) -> BinaryResolver:
        """Build a resolver from the ``binary`` configuration section."""
        binary = config.binary
        bundled = partial(bundled_ffmpeg_path, binary.bin_dir) if binary.use_bundled else None
        return cls(
            system_name=binary.system_name,
            bundled=bundled,
            version_timeout=binary.version_timeout,
        )

    def system_available(self) -> bool:
        """Check whether the system executable runs ``-version`` successfully."""
        try:
            result = subprocess.run(  # noqa: S603
                [self.system_name, "-version"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.version_timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            LOG.debug("System ffmpeg '%s' not usable: %s", self.system_name, e)
            return False
        else:
            return result.returncode == 0

    def bundled_path(self) -> str | None:
        """Ask the bundled strategy for a path, if one is configured."""
        if self.bundled is None:
            return None
        path = self.bundled()
        return str(path) if path else None

    def resolve(self) -> str:
        """
        Return a name or path for the ffmpeg executable.

        Raises:
            BinaryNotFoundError: if neither the system nor the bundled binary is usable

        """
        if self.system_available():
            LOG.debug("Using system ffmpeg: %s", self.system_name)
            return self.system_name

        bundled = self.bundled_path()
        if bundled:
            LOG.debug("Using bundled ffmpeg: %s", bundled)
            return bundled

        msg = "FFmpeg not found. Please install ffmpeg or run 'lumix-ffmpeg install' to fetch a bundled build."
        LOG.error(msg)
        raise BinaryNotFoundError(msg)


def resolve_ffmpeg_binary(config: LumixConfig | None = None) -> str:
    """Resolve the ffmpeg executable once using the given (or global) configuration."""
    return BinaryResolver.from_config(config or get_config()).resolve()
