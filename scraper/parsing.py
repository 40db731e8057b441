"""Parsers for the free-text fields of a course row."""

import re
from datetime import date, datetime, time, tzinfo as TzInfo
from typing import Optional, Union

from .errors import FormatError
from .models import Course, CourseField, CourseStatus, DateRange, FieldReader, TimeRange


TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(AM|PM)$", re.IGNORECASE)
DATE_FORMAT = "%m/%d/%Y"
RANGE_SEPARATOR = " - "
TIMES_SEPARATOR = " TO "
TBA = "TO BE ANNOUNCED"
ONLINE = "ONLINE"

# Length of the "Days: " and "Times: " labels
DAYS_LABEL_LENGTH = 6
TIMES_LABEL_LENGTH = 7

STATUS_MAP = {
    "ENROLLED": CourseStatus.ENROLLED,
    "WAITING": CourseStatus.WAITLISTED,
}


def parse_time_of_day(
    text: str,
    reference_date: Union[date, datetime],
    tzinfo: Optional[TzInfo] = None
) -> datetime:
    """Parse a time string like "2:19AM" on the given day.

    Args:
        text: Time of day in H:MM(AM|PM) form.
        reference_date: Day the time belongs to.
        tzinfo: Optional zone attached to the result.

    Returns:
        Datetime on the reference date with seconds zeroed.

    Raises:
        FormatError: If the text is not a valid 12-hour time.
    """
    match = TIME_PATTERN.match(text.strip())
    if not match:
        raise FormatError(f"Invalid time format: {text!r}. Expected H:MMAM or H:MMPM.")

    hour, minute = int(match.group(1)), int(match.group(2))
    period = match.group(3).upper()

    if not 1 <= hour <= 12 or minute > 59:
        raise FormatError(f"Time out of range: {text!r}")

    # 12 PM stays noon, 12 AM becomes midnight
    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0

    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    return datetime.combine(reference_date, time(hour, minute), tzinfo=tzinfo)


def parse_date_range(text: str) -> DateRange:
    """Parse a "M/D/YYYY - M/D/YYYY" string into a date range."""
    parts = text.strip().split(RANGE_SEPARATOR)
    if len(parts) != 2:
        raise FormatError(f"Invalid date range: {text!r}")

    try:
        start, end = (datetime.strptime(p.strip(), DATE_FORMAT).date() for p in parts)
    except ValueError as e:
        raise FormatError(f"Invalid date in range {text!r}: {e}") from e

    if end < start:
        raise FormatError(f"Date range ends before it starts: {text!r}")

    return DateRange(start=start, end=end)


def _parse_days(text: str) -> Optional[tuple[str, ...]]:
    content = text.strip()[DAYS_LABEL_LENGTH:].upper()
    if content == TBA:
        return None
    days = tuple(content.split(" "))
    if "" in days:
        raise FormatError(f"Invalid meeting days: {text!r}")
    return days


def _parse_times(text: str) -> Optional[TimeRange]:
    content = text.strip()[TIMES_LABEL_LENGTH:].upper()
    if content == TBA:
        return None

    parts = content.split(TIMES_SEPARATOR)
    if len(parts) != 2:
        raise FormatError(f"Invalid meeting times: {text!r}")

    return TimeRange(start=parts[0].strip(), end=parts[1].strip())


def _parse_room(text: str) -> Optional[str]:
    room = re.sub(r"\s", "", text).upper()
    if not room or room == ONLINE:
        return None
    return room


def _parse_status(text: str) -> CourseStatus:
    return STATUS_MAP.get(re.sub(r"\s", "", text).upper(), CourseStatus.UNKNOWN)


def extract_course(reader: FieldReader) -> Course:
    """Read all fields of one course row into an immutable Course.

    Args:
        reader: Source of the row's labelled text fields.

    Returns:
        Course built from the row.

    Raises:
        FormatError: If the date range or meeting times are malformed.
    """
    title = re.sub(r"\s+", " ", reader.read(CourseField.TITLE).strip())

    return Course(
        title=title,
        date_range=parse_date_range(reader.read(CourseField.DATE_RANGE)),
        days=_parse_days(reader.read(CourseField.DAYS)),
        times=_parse_times(reader.read(CourseField.TIMES)),
        room=_parse_room(reader.read(CourseField.ROOM)),
        status=_parse_status(reader.read(CourseField.STATUS)),
    )
