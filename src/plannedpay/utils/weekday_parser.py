"""Weekday list parsing utilities.

Weekday indices follow the planned payment convention: 0 is Sunday and 6 is
Saturday.
"""

from typing import Iterable

DAY_ABBREVIATIONS = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def parse_weekdays(days_str: str) -> tuple[int, ...]:
    """Parse a comma separated weekday list into sorted weekday indices.

    Accepts names ("mon", "Monday"), or indices ("1"), mixed freely:
    "mon,wed" and "1,3" both give (1, 3).

    Raises:
        ValueError: If a weekday is not recognized
    """
    indices = set()
    for part in days_str.split(","):
        token = part.strip().lower()
        if not token:
            continue
        if token.isdigit():
            index = int(token)
            if not 0 <= index <= 6:
                raise ValueError(f"Weekday index must be between 0 (Sunday) and 6, got {index}")
            indices.add(index)
        elif token in DAY_ABBREVIATIONS:
            indices.add(DAY_ABBREVIATIONS.index(token))
        elif token in DAY_NAMES:
            indices.add(DAY_NAMES.index(token))
        else:
            raise ValueError(f"Unknown weekday '{part.strip()}'")
    return tuple(sorted(indices))


def format_weekdays(days: Iterable[int]) -> str:
    """Format weekday indices as a readable list, e.g. "Mon, Wed"."""
    return ", ".join(DAY_ABBREVIATIONS[day].capitalize() for day in sorted(days))
