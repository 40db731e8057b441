"""Abstract base class for course transformers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from scraper.errors import FormatError
from scraper.models import Course
from scraper.parsing import parse_time_of_day

logger = logging.getLogger(__name__)


def format_utc_timestamp(instant: datetime) -> str:
    """Render an instant as an iCalendar UTC timestamp, e.g. 20220511T170000Z.

    Naive datetimes are taken to be UTC already.
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(timezone.utc)
    return instant.strftime("%Y%m%dT%H%M%SZ")


def weekly_rule(days: tuple[str, ...], until: str) -> str:
    """Build a weekly RRULE value for the given day tokens."""
    by_day = ",".join(day[:2] for day in days)
    return f"FREQ=WEEKLY;BYDAY={by_day};UNTIL={until}"


@dataclass(frozen=True)
class EventWindow:
    """First meeting of a course and the instant its recurrence stops."""

    start: datetime
    end: datetime
    until: datetime
    days: tuple[str, ...]


@dataclass
class Diagnostic:
    """A course left out of the output, with the reason and an event preview."""

    course: Course
    reason: str  # "online", "unscheduled" or "invalid"
    preview: dict[str, Any] = field(default_factory=dict)
    detail: str = ""


class BaseTransformer(ABC):
    """Abstract base class defining the interface for course transformers.

    Both output formats share the same selection and timing rules: online
    courses are reported instead of emitted, the first meeting is placed on
    the term start date and the event repeats weekly until the term ends.

    Extend this class to implement transformers for different output formats
    (e.g., iCalendar, Google Calendar API, JSON, etc.).
    """

    TIMEZONE = "America/Los_Angeles"
    REMINDER_MINUTES = (15, 90)

    def __init__(self, timezone_name: Optional[str] = None) -> None:
        self.timezone_name = timezone_name or self.TIMEZONE
        self.tz = ZoneInfo(self.timezone_name)
        self.diagnostics: list[Diagnostic] = []

    def event_window(self, course: Course) -> EventWindow:
        """Compute the first meeting and recurrence end of a scheduled course.

        Raises:
            FormatError: If the meeting times cannot be parsed.
        """
        if course.times is None or course.days is None:
            raise FormatError(f"Course {course.title!r} has no meeting times")

        first_day = course.date_range.start
        start = parse_time_of_day(course.times.start, first_day, self.tz)
        end = parse_time_of_day(course.times.end, first_day, self.tz)
        if not course.days or "" in course.days:
            raise FormatError(f"Course {course.title!r} has no valid meeting days")
        if end <= start:
            raise FormatError(f"Course {course.title!r} ends before it starts")

        # Last meeting on the final day still belongs to the series
        until = datetime.combine(course.date_range.end, end.time(), tzinfo=self.tz)

        return EventWindow(start=start, end=end, until=until, days=course.days)

    def reminders(self) -> dict[str, Any]:
        return {
            "useDefault": False,
            "overrides": [
                {"method": "popup", "minutes": minutes}
                for minutes in self.REMINDER_MINUTES
            ],
        }

    def preview_event(self, course: Course) -> dict[str, Any]:
        """Generic event body of a course that is not emitted.

        Start, end and recurrence stay empty since the course has no
        usable meeting pattern; the raw days and times are kept instead.
        """
        return {
            "summary": course.title,
            "location": course.room,
            "description": course.describe(),
            "start": None,
            "end": None,
            "recurrence": [],
            "reminders": self.reminders(),
            "days": list(course.days) if course.days else None,
            "times": [course.times.start, course.times.end] if course.times else None,
        }

    def _skip(self, course: Course, reason: str, detail: str = "") -> None:
        self.diagnostics.append(
            Diagnostic(course=course, reason=reason, preview=self.preview_event(course), detail=detail)
        )

    def transform(self, courses: list[Course]) -> Any:
        """Transform courses into the target format.

        Courses that are not emitted are collected in ``diagnostics``.

        Args:
            courses: List of courses to transform.

        Returns:
            Transformed data in the target format.
        """
        self.diagnostics = []
        self._begin()

        for course in courses:
            if course.is_online:
                logger.debug("Skipping online course %r", course.title)
                self._skip(course, "online")
                continue

            if not course.is_scheduled:
                logger.debug("Skipping unscheduled course %r", course.title)
                self._skip(course, "unscheduled")
                continue

            try:
                self._add_event(course, self.event_window(course))
            except FormatError as e:
                logger.warning("Skipping course %r: %s", course.title, e)
                self._skip(course, "invalid", str(e))

        return self._finish()

    @abstractmethod
    def _begin(self) -> None:
        """Start a new output document."""
        pass

    @abstractmethod
    def _add_event(self, course: Course, window: EventWindow) -> None:
        """Add one recurring event for a scheduled in-person course."""
        pass

    @abstractmethod
    def _finish(self) -> Any:
        """Return the completed output."""
        pass

    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.

        Args:
            output_path: Path to the output file.
        """
        pass
