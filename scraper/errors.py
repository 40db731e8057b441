"""Exceptions raised while reading the schedule page."""


class FormatError(ValueError):
    """Raised when schedule text does not follow the expected format."""
