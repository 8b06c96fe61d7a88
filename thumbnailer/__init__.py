"""Batch thumbnail extraction from film masters."""

__version__ = "1.0.0"

from .config import AppConfig, load_config
from .timecode import Timecode, apply_offset, parse_timecode

__all__ = ["AppConfig", "Timecode", "apply_offset", "load_config", "parse_timecode"]
