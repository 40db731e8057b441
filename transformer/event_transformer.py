"""Transformer producing Google Calendar API event bodies."""

import json
from typing import Any, Optional

from scraper.models import Course
from .base import BaseTransformer, EventWindow, weekly_rule


class GoogleEventTransformer(BaseTransformer):
    """Transformer that converts courses to generic calendar-event objects.

    The objects follow the ``events.insert`` request body of the Google
    Calendar API and can be submitted without writing a file.
    """

    def __init__(self, timezone_name: Optional[str] = None) -> None:
        super().__init__(timezone_name)
        self._events: Optional[list[dict[str, Any]]] = None

    def _begin(self) -> None:
        self._events = []

    def _require_events(self) -> list[dict[str, Any]]:
        if self._events is None:
            raise RuntimeError("No event data. Call transform() first.")
        return self._events

    def _add_event(self, course: Course, window: EventWindow) -> None:
        events = self._require_events()

        events.append({
            "summary": course.title,
            "location": course.room,
            "description": course.describe(),
            "start": {"dateTime": window.start.isoformat(), "timeZone": self.timezone_name},
            "end": {"dateTime": window.end.isoformat(), "timeZone": self.timezone_name},
            "recurrence": [
                "RRULE:" + weekly_rule(window.days, course.date_range.end.strftime("%Y%m%d"))
            ],
            "reminders": self.reminders(),
        })

    def _finish(self) -> list[dict[str, Any]]:
        return self._require_events()

    def save(self, output_path: str) -> None:
        """Save the events as a JSON array.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        events = self._require_events()

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(events, f, indent=2)
