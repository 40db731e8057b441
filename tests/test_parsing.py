"""Unit tests for time, date range and course field parsing."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from scraper.errors import FormatError
from scraper.models import CourseStatus, DateRange, TimeRange
from scraper.parsing import extract_course, parse_date_range, parse_time_of_day


class TestParseTimeOfDay:
    """Test cases for parse_time_of_day."""

    @pytest.mark.parametrize("text,hour,minute", [
        ("12:00AM", 0, 0),
        ("12:30PM", 12, 30),
        ("11:59PM", 23, 59),
        ("2:19AM", 2, 19),
        ("2:00pm", 14, 0),
        ("09:05AM", 9, 5),
    ])
    def test_converts_to_24_hour_time(self, text, hour, minute):
        """Test 12-hour strings map to the expected hour and minute."""
        result = parse_time_of_day(text, date(2023, 1, 23))

        assert result == datetime(2023, 1, 23, hour, minute)

    def test_uses_calendar_date_of_reference_datetime(self):
        """Test only the date of a datetime reference is kept."""
        result = parse_time_of_day("3:15PM", datetime(2023, 5, 12, 8, 42, 17, 500))

        assert result == datetime(2023, 5, 12, 15, 15)
        assert result.second == 0
        assert result.microsecond == 0

    def test_attaches_timezone(self):
        """Test the given zone is attached to the result."""
        tz = ZoneInfo("America/Los_Angeles")
        result = parse_time_of_day("2:00PM", date(2023, 1, 23), tz)

        assert result.tzinfo is tz
        assert result.astimezone(timezone.utc) == datetime(2023, 1, 23, 22, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", [
        "",
        "2:00",
        "14:00",
        "2:0PM",
        "2:00 PM",
        "123:00PM",
        "noon",
        "13:00PM",
        "0:30AM",
        "10:60AM",
    ])
    def test_invalid_text_raises(self, text):
        """Test malformed or out of range times raise FormatError."""
        with pytest.raises(FormatError):
            parse_time_of_day(text, date(2023, 1, 23))

    def test_format_error_is_value_error(self):
        """Test FormatError can be handled as ValueError."""
        with pytest.raises(ValueError):
            parse_time_of_day("later", date(2023, 1, 23))


class TestParseDateRange:
    """Test cases for parse_date_range."""

    def test_parses_start_and_end(self):
        """Test a M/D/YYYY range is split into two dates."""
        assert parse_date_range("1/23/2023 - 5/12/2023") == DateRange(
            date(2023, 1, 23), date(2023, 5, 12)
        )

    def test_accepts_zero_padding_and_outer_whitespace(self):
        """Test padded dates and surrounding whitespace are accepted."""
        assert parse_date_range("  01/03/2023 - 05/02/2023\n") == DateRange(
            date(2023, 1, 3), date(2023, 5, 2)
        )

    @pytest.mark.parametrize("text", [
        "1/23/2023",
        "1/23/2023 - 5/12/2023 - 6/1/2023",
        "1/23/2023-5/12/2023",
        "2023-01-23 - 2023-05-12",
        "13/01/2023 - 5/12/2023",
        "1/23/2023 - soon",
        "5/12/2023 - 1/23/2023",
    ])
    def test_invalid_range_raises(self, text):
        """Test malformed ranges raise FormatError."""
        with pytest.raises(FormatError):
            parse_date_range(text)


class TestExtractCourse:
    """Test cases for extract_course."""

    def test_scheduled_course(self, make_reader, cs101_fields):
        """Test every field of an in-person course is normalized."""
        course = extract_course(make_reader(**cs101_fields))

        assert course.title == "CS 101 Intro"
        assert course.date_range == DateRange(date(2023, 1, 23), date(2023, 5, 12))
        assert course.days == ("MO", "WE")
        assert course.times == TimeRange("2:00PM", "3:15PM")
        assert course.room == "GMCS-314"
        assert course.status is CourseStatus.ENROLLED
        assert not course.is_online
        assert course.is_scheduled

    def test_online_tba_course(self, make_reader, online_fields):
        """Test TBA days and times and an online room are absent."""
        course = extract_course(make_reader(**online_fields))

        assert course.title == "HIST 110 World History"
        assert course.days is None
        assert course.times is None
        assert course.room is None
        assert course.status is CourseStatus.WAITLISTED
        assert course.is_online
        assert not course.is_scheduled

    def test_lowercase_labels_are_uppercased(self, make_reader, cs101_fields):
        """Test days and times text is uppercased before splitting."""
        cs101_fields["days"] = "Days: Tu Th"
        cs101_fields["times"] = "Times: 9:30am to 10:45am"

        course = extract_course(make_reader(**cs101_fields))

        assert course.days == ("TU", "TH")
        assert course.times == TimeRange("9:30AM", "10:45AM")

    def test_room_whitespace_removed(self, make_reader, cs101_fields):
        """Test all whitespace is removed from the room."""
        cs101_fields["room"] = " gmcs \n 314 "

        assert extract_course(make_reader(**cs101_fields)).room == "GMCS314"

    @pytest.mark.parametrize("text,status", [
        ("Enrolled", CourseStatus.ENROLLED),
        (" ENROLLED\n", CourseStatus.ENROLLED),
        ("Waiting", CourseStatus.WAITLISTED),
        ("Dropped", CourseStatus.UNKNOWN),
        ("", CourseStatus.UNKNOWN),
    ])
    def test_status_mapping(self, make_reader, cs101_fields, text, status):
        """Test status text maps to the known states or UNKNOWN."""
        cs101_fields["status"] = text

        assert extract_course(make_reader(**cs101_fields)).status is status

    def test_tba_days_only(self, make_reader, cs101_fields):
        """Test TBA days with announced times is rejected."""
        cs101_fields["days"] = "Days: TO BE ANNOUNCED"

        with pytest.raises(FormatError):
            extract_course(make_reader(**cs101_fields))

    @pytest.mark.parametrize("text", ["Days: ", "Days:", "Days: MO  WE", "Days:  MO WE"])
    def test_empty_day_token_raises(self, make_reader, cs101_fields, text):
        """Test blank days or doubled spaces never yield an empty day token."""
        cs101_fields["days"] = text

        with pytest.raises(FormatError):
            extract_course(make_reader(**cs101_fields))

    def test_times_without_separator_raise(self, make_reader, cs101_fields):
        """Test meeting times must have exactly one TO separator."""
        cs101_fields["times"] = "Times: 2:00PM-3:15PM"

        with pytest.raises(FormatError):
            extract_course(make_reader(**cs101_fields))

    def test_bad_date_range_raises(self, make_reader, cs101_fields):
        """Test a malformed date range stops extraction of the record."""
        cs101_fields["date_range"] = "Spring 2023"

        with pytest.raises(FormatError):
            extract_course(make_reader(**cs101_fields))
