"""CLI command modules."""

from .convert import CONVERSIONS, ConvertCommands
from .utils import UtilityCommands

__all__ = ["CONVERSIONS", "ConvertCommands", "UtilityCommands"]
