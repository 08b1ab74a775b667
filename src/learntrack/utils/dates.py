"""
Date display helpers.

Dates are stored as ISO strings; these helpers only format them for
people to read.
"""

from datetime import date, datetime


def parse_date(value: str) -> date | None:
    """
    Parse an ISO date or datetime string.

    Returns:
        The date, or None if the value is empty or not ISO formatted
    """
    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value: str | None, fmt: str | None = None) -> str:
    """
    Format a stored date for display.

    Args:
        value: ISO date string, or None
        fmt: strftime format. Defaults to a short month style ("Jan 5, 2024").

    Returns:
        Formatted date, "" for missing values, or the raw value when it
        cannot be parsed
    """
    if not value:
        return ""
    parsed = parse_date(value)
    if parsed is None:
        return value
    if fmt:
        return parsed.strftime(fmt)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def today_iso() -> str:
    """Today's date as an ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()
