"""Transformer module for converting courses to various output formats."""

from .base import BaseTransformer, Diagnostic, EventWindow, format_utc_timestamp, weekly_rule
from .event_transformer import GoogleEventTransformer
from .ical_transformer import ICalTransformer

__all__ = [
    "BaseTransformer",
    "Diagnostic",
    "EventWindow",
    "GoogleEventTransformer",
    "ICalTransformer",
    "format_utc_timestamp",
    "weekly_rule",
]
