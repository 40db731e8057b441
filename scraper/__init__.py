"""Scraper module for extracting enrolled courses from the class schedule page."""

from .errors import FormatError
from .models import Course, CourseField, CourseStatus, DateRange, FieldReader, TimeRange
from .parsing import extract_course, parse_date_range, parse_time_of_day
from .scraper import HtmlCourseRecord, ScheduleScraper

__all__ = [
    "Course",
    "CourseField",
    "CourseStatus",
    "DateRange",
    "FieldReader",
    "FormatError",
    "HtmlCourseRecord",
    "ScheduleScraper",
    "TimeRange",
    "extract_course",
    "parse_date_range",
    "parse_time_of_day",
]
