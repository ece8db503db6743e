"""Small text helpers shared by age strings and bucket labels."""

from __future__ import annotations


def pluralize(count: int, unit: str) -> str:
    """Render a count with its unit, adding an "s" unless the count is 1.

    Args:
        count: The quantity.
        unit: Singular unit name, e.g. "week" or "Month".

    Returns:
        Text such as "1 week" or "3 Months".

    Example:
        >>> pluralize(1, "Year")
        '1 Year'
        >>> pluralize(0, "Month")
        '0 Months'
    """
    return f"{count} {unit}{'' if count == 1 else 's'}"
