"""Time window and timestamp utilities for the rewind pipeline."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from rewind.core.errors import InvalidPeriodError
from rewind.core.logging import get_logger

logger = get_logger(__name__)


class Period(str, Enum):
    """Named rewind periods."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: Any) -> "Period":
        """
        Validate a period selector.

        Raises:
            InvalidPeriodError: if the value is not week, month or year
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidPeriodError(value) from None


# Fill-in values for dateutil; they differ in every date part
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)

PERIOD_LABELS = {
    Period.WEEK: "Random Week in Crackd History",
    Period.MONTH: "Random Month in Crackd History",
    Period.YEAR: "Random Year in Crackd History",
}


@dataclass(frozen=True)
class Window:
    """Closed interval [start, end] selected by a period."""
    period: Period
    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self.period]

    def contains(self, moment: Optional[datetime]) -> bool:
        """Inclusive on both ends; a missing timestamp is never inside."""
        if moment is None:
            return False
        return self.start <= to_utc(moment) <= self.end


def compute_window(period: Any, now: Optional[datetime] = None) -> Window:
    """
    Compute the [start, end] interval for a period ending at ``now``.

    Month and year use calendar subtraction. When the target month is shorter
    the day is clamped to its last day, so March 31 minus one month is the last
    day of February and February 29 minus one year is February 28.

    Args:
        period: 'week', 'month', 'year' or a Period
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        Window with end == now

    Raises:
        InvalidPeriodError: for an unrecognized selector
    """
    period = Period.parse(period)
    end = to_utc(now) if now is not None else get_current_utc_time()

    if period is Period.WEEK:
        start = end - timedelta(days=7)
    elif period is Period.MONTH:
        start = end - relativedelta(months=1)
    else:
        start = end - relativedelta(years=1)

    return Window(period=period, start=start, end=end)


def to_utc(dt: datetime) -> datetime:
    """
    Attach UTC to naive datetimes and convert aware ones to UTC.

    Args:
        dt: Datetime object (may be naive or timezone-aware)

    Returns:
        UTC datetime object
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a record timestamp.

    Accepts datetimes and ISO-8601 (or otherwise dateutil-parseable) strings.
    Unlike feed dates there is no fallback to "now": an unparseable value
    yields None so the record drops out of the window.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, str):
        try:
            return to_utc(date_parser.isoparse(value))
        except ValueError:
            pass
        try:
            # Parse twice with different defaults; a value that leaves any
            # date part to the default (e.g. "12" or "Oct") is incomplete
            first = date_parser.parse(value, default=_DEFAULT_A)
            second = date_parser.parse(value, default=_DEFAULT_B)
        except (ValueError, OverflowError) as e:
            logger.debug(f"Could not parse timestamp {value!r}: {e}")
            return None
        if first.date() != second.date():
            logger.debug(f"Incomplete timestamp {value!r}")
            return None
        return to_utc(first)

    logger.debug(f"Unsupported timestamp type: {type(value).__name__}")
    return None


def get_current_utc_time() -> datetime:
    """Get current time in UTC."""
    return datetime.now(timezone.utc)
