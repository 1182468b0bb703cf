"""
Scalar Converters
=================

Read-side converters for string-encoded timestamps.

Older pipelines stored dates as ISO strings. When such a value is read back
into a date-typed field, one of these turns it into a native value. Both are
total: None in, None out.
"""
from datetime import date, datetime, tzinfo
from typing import Callable, Dict, Optional

from variant_dbenv.utils.datetime_utils import parse_iso, to_local_date, to_naive_utc

ScalarConverter = Callable[[Optional[str]], Optional[object]]


def datetime_from_string(source: Optional[str]) -> Optional[datetime]:
    """Convert an ISO 8601 string to a datetime; strings with an offset become naive UTC."""
    return None if source is None else to_naive_utc(parse_iso(source))


def make_date_from_string(tz: tzinfo) -> Callable[[Optional[str]], Optional[date]]:
    """
    Build the string -> date converter for a timezone.

    The result is the calendar date at local midnight in ``tz``.
    """

    def date_from_string(source: Optional[str]) -> Optional[date]:
        return None if source is None else to_local_date(parse_iso(source), tz)

    return date_from_string


def default_converters(tz: tzinfo) -> Dict[type, ScalarConverter]:
    """The two converters registered on every document mapper, keyed by target type."""
    return {
        datetime: datetime_from_string,
        date: make_date_from_string(tz),
    }
