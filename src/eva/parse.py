"""Parsing of user input from the command line."""

import math
from datetime import datetime, timedelta, timezone, tzinfo

from dateutil import parser as date_parser

from .core.tasks import MAX_DURATION, MAX_IMPORTANCE, MIN_IMPORTANCE


class ParseError(ValueError):
    """Raised when user input cannot be understood."""

    def __init__(self, what: str, text: str, suggestion: str):
        self.what = what
        self.text = text
        super().__init__(f"I don't understand the {what} you gave ({text}). {suggestion}")


def parse_id(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ParseError("id", text, "Try entering a valid integer.") from None


def parse_importance(text: str) -> int:
    try:
        importance = int(text)
    except ValueError:
        raise ParseError("importance", text, "Try entering a valid integer.") from None
    if not MIN_IMPORTANCE <= importance <= MAX_IMPORTANCE:
        raise ParseError(
            "importance",
            text,
            f"Try a number from {MIN_IMPORTANCE} to {MAX_IMPORTANCE}.",
        )
    return importance


def parse_hours(text: str, what: str = "duration") -> float:
    """Parse a positive, possibly fractional, number of hours."""
    try:
        hours = float(text)
    except ValueError:
        raise ParseError(what, text, "Try entering a valid, real number.") from None
    if not hours > 0:
        raise ParseError(what, text, "Try entering a positive number.")
    if not math.isfinite(hours) or hours > MAX_DURATION:
        raise ParseError(what, text, f"Try a number of hours no larger than {MAX_DURATION}.")
    return hours


def parse_datetime(text: str, tz: tzinfo, what: str = "deadline") -> datetime:
    """
    Parse a date and time such as '4 Jul 2017 6:05'.

    Times without an explicit offset are taken to be in tz. The result is
    always in UTC.
    """
    try:
        dt = date_parser.parse(text)
    except (ValueError, OverflowError):
        raise ParseError(what, text, "Try entering something like '4 Jul 2017 6:05'.") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        raise ParseError(what, text, "Try a date that isn't at the very end of the calendar.") from None


def parse_range(text: str) -> tuple[timedelta, timedelta]:
    """
    Parse an availability range given as 'FROM:TO' hour offsets.

    '9:17' is 09:00 to 17:00 of the first day, '33:41' the same hours on the
    second day. Offsets may be fractional ('9.5:12').
    """
    start_text, sep, end_text = text.partition(":")
    if not sep:
        raise ParseError("range", text, "Try something like '9:17' (hours from the segment start).")
    try:
        start, end = float(start_text), float(end_text)
    except ValueError:
        raise ParseError("range", text, "Both ends must be numbers of hours, like '9:17'.") from None
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ParseError("range", text, "Both ends must be finite numbers of hours, like '9:17'.")
    if start < 0 or end <= start:
        raise ParseError("range", text, "The range must end after it starts, like '9:17'.")
    return timedelta(hours=start), timedelta(hours=end)
