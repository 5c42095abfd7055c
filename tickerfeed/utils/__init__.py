"""Utility helpers for TickerFeed."""

from tickerfeed.utils.logging_setup import get_logger, parse_size, setup_logging
from tickerfeed.utils.text import (
    fill_placeholders,
    format_number,
    format_percent,
    round_half_up,
    to_text,
)

__all__ = [
    "fill_placeholders",
    "format_number",
    "format_percent",
    "get_logger",
    "parse_size",
    "round_half_up",
    "setup_logging",
    "to_text",
]
