"""Clock string helpers shared by the Panchang services.

All Panchang windows are handled as minutes since local midnight. Values
that leave the ``[0, 1440)`` range (for example Brahma Muhurat, which starts
before sunrise) are wrapped when formatted.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

MINUTES_PER_DAY = 1440

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})(?::\d{2})?\s*([AaPp]\.?[Mm]\.?)?")


class FormatError(ValueError):
    """Raised when a clock string is not ``H:MM`` or ``HH:MM``."""


def time_to_minutes(hhmm: str) -> int:
    """Parse ``H:MM``/``HH:MM`` into minutes since midnight."""

    if not isinstance(hhmm, str):
        raise FormatError(f"Expected a clock string, got {type(hhmm).__name__}")
    match = _HHMM_RE.match(hhmm.strip())
    if not match:
        raise FormatError(f"Invalid clock string: {hhmm!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise FormatError(f"Clock value out of range: {hhmm!r}")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes as ``HH:MM``, wrapping modulo one day."""

    wrapped = int(minutes) % MINUTES_PER_DAY
    hours, mins = divmod(wrapped, 60)
    return f"{hours:02d}:{mins:02d}"


def normalize_clock(text: Optional[str]) -> Optional[str]:
    """Return the first clock value found in scraped text as ``HH:MM``.

    Accepts 24-hour values and 12-hour values with an AM/PM marker, with
    optional trailing context such as ``", Jun 23"``. Returns ``None`` when
    no usable clock value is present.
    """

    if not text:
        return None
    match = _CLOCK_RE.search(str(text))
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").replace(".", "").lower()
    if meridiem:
        if not 1 <= hours <= 12:
            return None
        if meridiem == "am":
            hours = 0 if hours == 12 else hours
        else:
            hours = 12 if hours == 12 else hours + 12
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def format_span(start: int, end: int) -> str:
    return f"{minutes_to_time(start)} - {minutes_to_time(end)}"


def parse_span(text: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split a ``start - end`` (or ``start to end``) window into clock values."""

    if not text:
        return None
    found = []
    for match in _CLOCK_RE.finditer(str(text)):
        value = normalize_clock(match.group(0))
        if value:
            found.append(value)
    if len(found) < 2:
        return None
    return found[0], found[1]


def normalize_span(text: Optional[str]) -> Optional[str]:
    span = parse_span(text)
    if span is None:
        return None
    return f"{span[0]} - {span[1]}"


def format_duration(minutes: int) -> str:
    minutes = max(0, int(minutes))
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m"
