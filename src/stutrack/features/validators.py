"""Data entry validator classes."""

import datetime
import re
from typing import Optional

import dateutil.parser

from textual import validation


# Two unrelated defaults. A date field must change at least one of them.
_DATE_DEFAULTS = (datetime.datetime(2000, 1, 1), datetime.datetime(2001, 2, 2))
_TIME_DEFAULT = datetime.datetime(1, 1, 1)
_AM_PM = re.compile(r"[ap]\.?m\.?\s*$", re.IGNORECASE)


def parse_date(value: str) -> datetime.date:
    """Convert user input to a date.

    Raises:
        ValueError if the input is not a recognizable date, or contains
        only a time of day.
    """
    try:
        if all(
            dateutil.parser.parse(value, default=default).date() == default.date()
            for default in _DATE_DEFAULTS
        ):
            raise ValueError(f"No date in {value!r}")
        return dateutil.parser.parse(value, dayfirst=False).date()
    except OverflowError as err:
        raise ValueError(str(err)) from err


def parse_time(value: str) -> Optional[datetime.time]:
    """Convert user input such as '14:30' or '2:30 pm' to a time of day.

    Blank input means no time was recorded and returns None.

    Raises:
        ValueError if the input is not a recognizable time, or if it
        contains a date.
    """
    if not value.strip():
        return None
    if ":" not in value and not _AM_PM.search(value):
        raise ValueError(f"Enter the time as HH:MM, not {value!r}")
    try:
        parsed = dateutil.parser.parse(value, default=_TIME_DEFAULT)
    except OverflowError as err:
        raise ValueError(str(err)) from err
    if parsed.date() != _TIME_DEFAULT.date():
        raise ValueError(f"Enter only a time of day, not {value!r}")
    return parsed.time().replace(microsecond=0)


class NotEmpty(validation.Validator):
    """Reject blank input."""

    def validate(self, value: str) -> validation.ValidationResult:
        """Verify input has at least one non-space character."""
        if not value.strip():
            return self.failure("Field cannot be empty.")
        return self.success()


class DateValidator(validation.Validator):
    """Validate user input."""

    def validate(self, value: str) -> validation.ValidationResult:
        """Verify input is a valid date."""
        try:
            parse_date(value)
            return self.success()
        except ValueError as err:
            return self.failure(str(err))


class TimeValidator(validation.Validator):
    """Accept a time of day or a blank value."""

    def validate(self, value: str) -> validation.ValidationResult:
        """Verify input is blank or a valid time of day."""
        try:
            parse_time(value)
            return self.success()
        except ValueError as err:
            return self.failure(str(err))


class YearValidator(validation.Validator):
    """Accept a blank value or a year within a range."""

    first_year: int
    last_year: int

    def __init__(self, first_year: int, last_year: int) -> None:
        """Set the range of acceptable years."""
        super().__init__()
        self.first_year = first_year
        self.last_year = last_year

    def validate(self, value: str) -> validation.ValidationResult:
        """Verify input is blank or a year in range."""
        value = value.strip()
        if not value:
            return self.success()
        if not value.isdigit():
            return self.failure("Must be a valid year (e.g., 2026).")
        if not self.first_year <= int(value) <= self.last_year:
            return self.failure(
                f"Year must be between {self.first_year} and {self.last_year}."
            )
        return self.success()
