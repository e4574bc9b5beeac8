"""Main CLI interface for lumix-ffmpeg."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.constants import VERBOSE_LOGGING_THRESHOLD
from ..core import ConfigManager, with_config_overrides
from .commands import ConvertCommands, UtilityCommands


class LumixCLI:
    """Command line front end for conversions and binary management."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_manager = ConfigManager(config_path)
        self.convert_commands = ConvertCommands(self.config_manager)
        self.utility_commands = UtilityCommands(self.config_manager)

    @staticmethod
    def setup_logging(verbosity: int) -> None:
        """Setup logging based on verbosity level."""
        level_map = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG,
        }

        level = level_map.get(verbosity, logging.DEBUG)

        log_format = (
            "%(levelname)s: %(name)s: %(message)s"
            if verbosity >= VERBOSE_LOGGING_THRESHOLD
            else "%(levelname)s: %(message)s"
        )

        logging.basicConfig(
            level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)], force=True
        )

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog="lumix-ffmpeg",
            description="Convert media with ffmpeg and manage the ffmpeg binary",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Raw PCM to MP3
  lumix-ffmpeg convert pcm-to-mp3 voice.pcm voice.mp3 --sample-rate 48000

  # Web-ready MP4
  lumix-ffmpeg convert mp4 clip.mov clip.mp4 --crf 20

  # Fetch a static ffmpeg build when none is installed
  lumix-ffmpeg install

  # Show which ffmpeg will be used
  lumix-ffmpeg info
            """,
        )

        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for info, -vv for debug)",
        )
        parser.add_argument("--config", type=Path, help="Path to configuration file")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be done without actually doing it",
        )
        parser.add_argument("--no-bundled", action="store_true", help="Never fall back to the bundled ffmpeg")

        subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

        convert_parser = subparsers.add_parser(
            "convert",
            help="Run a conversion",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.convert_commands.add_arguments(convert_parser)

        install_parser = subparsers.add_parser("install", help="Download a prebuilt ffmpeg")
        self.utility_commands.add_install_arguments(install_parser)

        subparsers.add_parser("info", help="Show the ffmpeg binary that will be used")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parser = self.build_parser()
        parsed_args = parser.parse_args(args)

        self.setup_logging(parsed_args.verbose)

        if getattr(parsed_args, "config", None):
            self.config_manager = ConfigManager(parsed_args.config)
            self.convert_commands.config_manager = self.config_manager
            self.utility_commands.config_manager = self.config_manager

        overrides = {"binary.use_bundled": False} if parsed_args.no_bundled else {}

        try:
            with with_config_overrides(self.config_manager, **overrides):
                if parsed_args.command == "convert":
                    return self.convert_commands.handle_command(parsed_args)
                if parsed_args.command == "install":
                    return self.utility_commands.handle_install(parsed_args)
                if parsed_args.command == "info":
                    return self.utility_commands.handle_info(parsed_args)
                parser.error(f"Unknown command: {parsed_args.command}")

        except KeyboardInterrupt:
            logging.getLogger(__name__).info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception:
            logging.getLogger(__name__).exception("Unexpected error")
            return 1

        return 0


def main() -> int:
    """Entry point for the CLI."""
    cli = LumixCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
