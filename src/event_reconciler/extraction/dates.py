"""Date-line detection for raw event pages.

Event pages show dates as "21 Dec 2025 at 16:00" or
"Friday 17 July 2026 at 04:30 UTC+06". The first line carrying such a date
is returned verbatim; no calendar parsing is attempted.
"""

import re

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Full names first so "January" is not cut at "Jan"
_MONTH_ALT = "|".join([*MONTHS, *(m[:3] for m in MONTHS), "Sept"])
_WEEKDAY_ALT = "|".join(WEEKDAYS)

DAY_MONTH_YEAR = re.compile(rf"\b\d{{1,2}}\s+(?:{_MONTH_ALT})\.?\s+\d{{4}}\b", re.IGNORECASE)
WEEKDAY_DAY_MONTH_YEAR = re.compile(
    rf"\b(?:{_WEEKDAY_ALT}),?\s+\d{{1,2}}\s+(?:{_MONTH_ALT})\s+\d{{4}}\b",
    re.IGNORECASE,
)


def extract_date_line(blob: str) -> str | None:
    """Return the first line of ``blob`` that contains a date.

    Args:
        blob: Raw page text.

    Returns:
        The stripped line, or None if no line matches.

    Example:
        >>> extract_date_line("Details\\nFriday 17 July 2026 at 04:30\\n")
        'Friday 17 July 2026 at 04:30'
    """
    for line in blob.splitlines():
        if WEEKDAY_DAY_MONTH_YEAR.search(line) or DAY_MONTH_YEAR.search(line):
            return line.strip()
    return None
