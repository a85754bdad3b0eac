"""Utility functions."""

from .logging_config import setup_logging
from .terminal import (
    console,
    create_table,
    format_difficulty,
    format_status_color,
    print_verdict,
    scanline,
    scanline_trim,
)

__all__ = [
    "setup_logging",
    "console",
    "create_table",
    "format_difficulty",
    "format_status_color",
    "print_verdict",
    "scanline",
    "scanline_trim",
]
