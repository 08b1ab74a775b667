"""Utility modules for learntrack."""

from .dates import format_date, parse_date, today_iso

__all__ = [
    "format_date",
    "parse_date",
    "today_iso",
]
