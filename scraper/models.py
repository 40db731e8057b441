"""Data models for enrolled courses."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Protocol

from .errors import FormatError


class CourseStatus(Enum):
    """Enrollment state reported by the schedule page."""

    ENROLLED = "Enrolled"
    WAITLISTED = "Waitlisted"
    UNKNOWN = "Unknown"


class CourseField(Enum):
    """The labelled text fields of one course row."""

    TITLE = "title"
    DATE_RANGE = "date_range"
    DAYS = "days"
    TIMES = "times"
    ROOM = "room"
    STATUS = "status"


class FieldReader(Protocol):
    """Source of the raw text behind one course row."""

    def read(self, field: CourseField) -> str:
        ...


@dataclass(frozen=True)
class DateRange:
    """First and last class date of the term."""

    start: date
    end: date


@dataclass(frozen=True)
class TimeRange:
    """Start and end time of a meeting, e.g. "2:00PM" and "3:15PM"."""

    start: str
    end: str


@dataclass(frozen=True)
class Course:
    """Represents one enrolled class extracted from the schedule page."""

    title: str
    date_range: DateRange
    days: Optional[tuple[str, ...]]  # e.g. ("MO", "WE"), None if TBA
    times: Optional[TimeRange]
    room: Optional[str]  # None for online courses
    status: CourseStatus = CourseStatus.UNKNOWN

    def __post_init__(self) -> None:
        if (self.days is None) != (self.times is None):
            raise FormatError(
                f"Course {self.title!r} must have both days and times or neither"
            )

    @classmethod
    def from_reader(cls, reader: FieldReader) -> "Course":
        """Build a Course from the raw fields of one course row."""
        from .parsing import extract_course

        return extract_course(reader)

    @property
    def is_online(self) -> bool:
        return self.room is None

    @property
    def is_scheduled(self) -> bool:
        return self.days is not None

    def describe(self) -> str:
        """Multi-line summary used in diagnostics and event descriptions."""
        days = ", ".join(self.days) if self.days else "TBA"
        times = f"{self.times.start}, {self.times.end}" if self.times else "TBA"
        return (
            f"{self.title} ({self.room or 'ONLINE'})\n"
            f"    Days: {days}\n"
            f"    Times: {times}\n"
            f"    Start: {self.date_range.start.isoformat()}\n"
            f"    End: {self.date_range.end.isoformat()}\n"
            f"    Status: {self.status.value}"
        )
