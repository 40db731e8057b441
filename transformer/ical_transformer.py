"""iCalendar transformer for enrolled courses."""

import re
from datetime import datetime, time, timedelta, timezone
from typing import Callable, Optional

from icalendar import Calendar, Event, Timezone, TimezoneDaylight, TimezoneStandard, vRecur
from icalendar.prop import vInline

from scraper.errors import FormatError
from scraper.models import Course
from .base import BaseTransformer, EventWindow, format_utc_timestamp, weekly_rule


class ICalTransformer(BaseTransformer):
    """Transformer that converts courses to an importable iCalendar file.

    The VTIMEZONE block always carries the US Pacific daylight saving rules,
    whatever zone is configured.
    """

    PRODID = "-//sdsu2ical//SDSU Class Exporter 0.1.0//EN"
    CALENDAR_NAME = "SDSU School Schedule"
    UID_DOMAIN = "sdsu2ical"

    def __init__(
        self,
        timezone_name: Optional[str] = None,
        calendar_name: Optional[str] = None,
        include_timezone: bool = True,
        clock: Optional[Callable[[], datetime]] = None
    ) -> None:
        """Initialize the iCalendar transformer.

        Args:
            timezone_name: IANA zone the schedule times are given in.
            calendar_name: Display name written to X-WR-CALNAME.
            include_timezone: If True, write the calendar name, zone name
                and VTIMEZONE block after the header.
            clock: Returns the current time for CREATED (default: now in UTC).
        """
        super().__init__(timezone_name)
        self.calendar_name = calendar_name or self.CALENDAR_NAME
        self._include_timezone = include_timezone
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._calendar: Optional[Calendar] = None

    def _generate_uid(self, course: Course) -> str:
        """Generate a stable identifier from the course title."""
        return re.sub(r"[^a-zA-Z0-9]", "", course.title) + "@" + self.UID_DOMAIN

    def _build_timezone(self) -> Timezone:
        """Build the fixed Pacific time VTIMEZONE block."""
        tz = Timezone()
        tz.add("tzid", self.timezone_name)
        tz.add("x-lic-location", self.timezone_name)

        daylight = TimezoneDaylight()
        daylight.add("tzoffsetfrom", timedelta(hours=-8))
        daylight.add("tzoffsetto", timedelta(hours=-7))
        daylight.add("tzname", "PDT")
        daylight.add("dtstart", datetime(1970, 3, 8, 2, 0, 0))
        daylight.add("rrule", vRecur({"freq": "yearly", "bymonth": 3, "byday": "2SU"}))
        tz.add_component(daylight)

        standard = TimezoneStandard()
        standard.add("tzoffsetfrom", timedelta(hours=-7))
        standard.add("tzoffsetto", timedelta(hours=-8))
        standard.add("tzname", "PST")
        standard.add("dtstart", datetime(1970, 11, 1, 2, 0, 0))
        standard.add("rrule", vRecur({"freq": "yearly", "bymonth": 11, "byday": "1SU"}))
        tz.add_component(standard)

        return tz

    def _begin(self) -> None:
        self._calendar = Calendar()
        self._calendar.add("prodid", self.PRODID)
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")

        if self._include_timezone:
            self._calendar.add("x-wr-calname", self.calendar_name)
            self._calendar.add("x-wr-timezone", self.timezone_name)
            self._calendar.add_component(self._build_timezone())

    def _require_calendar(self) -> Calendar:
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        return self._calendar

    def _add_event(self, course: Course, window: EventWindow) -> None:
        calendar = self._require_calendar()
        if course.times is None:
            raise FormatError(f"Course {course.title!r} has no meeting times")

        event = Event()
        event.add("uid", self._generate_uid(course))
        event.add("summary", course.title)
        event.add(
            "description",
            f"{course.times.start} to {course.times.end} on {' '.join(window.days)}"
        )
        event.add("location", course.room)
        event.add("dtstart", window.start.astimezone(timezone.utc))
        event.add("dtend", window.end.astimezone(timezone.utc))

        # Stamped with the term start so repeated exports stay identical
        term_start = datetime.combine(course.date_range.start, time(0), tzinfo=self.tz)
        event.add("dtstamp", term_start.astimezone(timezone.utc))

        event["rrule"] = vInline(weekly_rule(window.days, format_utc_timestamp(window.until)))
        event.add("created", self._clock().astimezone(timezone.utc))
        event.add("priority", 0)
        event.add("status", "CONFIRMED")

        calendar.add_component(event)

    def _finish(self) -> Calendar:
        return self._require_calendar()

    def to_ical(self) -> bytes:
        """Serialize the calendar built by the last transform() call.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        # Keep properties in the order they were added
        return self._require_calendar().to_ical(sorted=False)

    def render(self) -> str:
        """Return the calendar as text."""
        return self.to_ical().decode("utf-8")

    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.

        Args:
            output_path: Path to the output file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        data = self.to_ical()
        with open(output_path, "wb") as f:
            f.write(data)
