"""CLI module for lumix-ffmpeg."""

from .commands import ConvertCommands, UtilityCommands
from .main import LumixCLI, main

__all__ = [
    "ConvertCommands",
    "LumixCLI",
    "UtilityCommands",
    "main",
]
