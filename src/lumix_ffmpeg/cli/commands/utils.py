"""Utility CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...binaries import DEFAULT_BIN_DIR, bundled_ffmpeg_path
from ...binaries.install import BinaryInstaller, platform_key
from ...core import BinaryNotFoundError, BinaryResolver, FFmpegRunner, InstallError

if TYPE_CHECKING:
    import argparse

    from ...core import ConfigManager

LOG = logging.getLogger(__name__)


class UtilityCommands:
    """Installer and diagnostics command handlers."""

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize utility commands handler."""
        self.config_manager = config_manager

    def add_install_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add installer arguments to parser."""
        parser.add_argument("--force", "-f", action="store_true", help="Reinstall even if ffmpeg is present")
        parser.add_argument("--bin-dir", type=Path, help="Directory to install the binary into")
        parser.add_argument("--no-progress", action="store_true", help="Hide the download progress bar")

    def handle_install(self, args: argparse.Namespace) -> int:
        """Download the bundled ffmpeg build."""
        config = self.config_manager.effective_config()
        bin_dir = args.bin_dir or config.binary.bin_dir or DEFAULT_BIN_DIR

        if getattr(args, "dry_run", False):
            LOG.info("Dry run: would install ffmpeg for %s into %s", platform_key(), bin_dir)
            return 0

        installer = BinaryInstaller(
            config.install,
            bin_dir=bin_dir,
            show_progress=not args.no_progress,
        )
        try:
            binary = installer.install(force=args.force)
        except InstallError:
            LOG.exception("Failed to download FFmpeg")
            return 1

        if binary is None:
            LOG.warning("No ffmpeg binary was installed into %s", bin_dir)
        else:
            print(binary)
        return 0

    def handle_info(self, _args: argparse.Namespace) -> int:
        """Show which ffmpeg would be used."""
        config = self.config_manager.effective_config()
        resolver = BinaryResolver.from_config(config)

        print(f"Platform:        {platform_key()}")
        system_state = "usable" if resolver.system_available() else "missing"
        print(f"System binary:   {config.binary.system_name} ({system_state})")
        bundled = bundled_ffmpeg_path(config.binary.bin_dir)
        print(f"Bundled binary:  {bundled or 'not installed'}")

        try:
            binary = resolver.resolve()
        except BinaryNotFoundError:
            print("Resolved binary: none")
            return 1

        runner = FFmpegRunner(binary=binary, resolver=resolver)
        print(f"Resolved binary: {binary}")
        print(f"Version:         {runner.version() or 'unknown'}")
        print(f"Encoders:        {len(runner.get_available_encoders())}")
        return 0
