"""Shared fixtures for course extraction and calendar tests."""
from datetime import date, datetime, timezone

import pytest

from scraper.models import Course, CourseField, CourseStatus, DateRange, TimeRange


class DictReader:
    """Field reader backed by a plain dict of raw field texts."""

    def __init__(self, **fields: str) -> None:
        self._fields = {CourseField(name): text for name, text in fields.items()}

    def read(self, field: CourseField) -> str:
        return self._fields[field]


ROW_TEMPLATE = """
<div class="ps_box-scrollarea-row">
  <a id="DERIVED_SSR_FL_SSR_SCRTAB_DTLS${i}" href="#">{title}</a>
  <span id="DERIVED_SSR_FL_SSR_ST_END_DT1${i}">{date_range}</span>
  <span id="DERIVED_SSR_FL_SSR_DAYS1${i}">{days}</span>
  <span id="DERIVED_SSR_FL_SSR_DAYSTIMES1${i}">{times}</span>
  <span id="DERIVED_SSR_FL_SSR_DRV_ROOM1${i}">{room}</span>
  <span id="DERIVED_SSR_FL_SSR_DRV_STAT${i}">{status}</span>
</div>
"""


def schedule_page(rows: list[dict[str, str]]) -> str:
    """Render a minimal class schedule page with the given course rows."""
    body = "".join(ROW_TEMPLATE.format(i=i, **row) for i, row in enumerate(rows))
    return (
        "<html><body><div class=\"ps_box-group\">"
        "<div class=\"ps_box-scrollarea psc_border-bottomonly\">"
        f"{body}</div></div></body></html>"
    )


@pytest.fixture
def cs101_fields() -> dict[str, str]:
    return {
        "title": "CS 101 Intro ",
        "date_range": "1/23/2023 - 5/12/2023",
        "days": "Days: MO WE",
        "times": "Times: 2:00PM TO 3:15PM",
        "room": "GMCS-314",
        "status": "Enrolled",
    }


@pytest.fixture
def online_fields() -> dict[str, str]:
    return {
        "title": "HIST 110  World History",
        "date_range": "1/23/2023 - 5/12/2023",
        "days": "Days: TO BE ANNOUNCED",
        "times": "Times: TO BE ANNOUNCED",
        "room": "  Online ",
        "status": "Waiting",
    }


@pytest.fixture
def cs101() -> Course:
    return Course(
        title="CS 101 Intro",
        date_range=DateRange(date(2023, 1, 23), date(2023, 5, 12)),
        days=("MO", "WE"),
        times=TimeRange("2:00PM", "3:15PM"),
        room="GMCS-314",
        status=CourseStatus.ENROLLED,
    )


@pytest.fixture
def online_course() -> Course:
    return Course(
        title="HIST 110 World History",
        date_range=DateRange(date(2023, 1, 23), date(2023, 5, 12)),
        days=None,
        times=None,
        room=None,
        status=CourseStatus.WAITLISTED,
    )


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2023, 1, 10, 12, 30, 45, tzinfo=timezone.utc)


@pytest.fixture
def make_reader():
    return DictReader


@pytest.fixture
def make_page():
    return schedule_page
