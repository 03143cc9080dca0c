"""Resolution of reporting periods into concrete, inclusive date ranges.

Every period is resolved in a single timezone: ``start`` is local midnight of
the first day and ``end`` is the last representable instant of the last day.
"""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, tzinfo

from .errors import InvalidPeriodValue
from .models import DateRange, PeriodSpec, PeriodType

DAY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
WEEK_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")
MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")
YEAR_PATTERN = re.compile(r"^(\d{4})$")

END_OF_DAY = time.max


def iso_weeks_in_year(year: int) -> int:
    # Dec 28 always falls in the last ISO week of its year.
    return date(year, 12, 28).isocalendar()[1]


def iso_week_monday(year: int, week: int) -> date:
    """Return the Monday that starts ISO week ``week`` of ``year``.

    Week 1 is the week holding the year's first Thursday, so the Monday of
    week 1 is three days before that Thursday and may fall in December of the
    previous year.
    """
    jan_first = date(year, 1, 1)
    first_thursday = jan_first + timedelta(days=(3 - jan_first.weekday()) % 7)
    week_one_monday = first_thursday - timedelta(days=3)
    return week_one_monday + timedelta(weeks=week - 1)


def _year(period: PeriodSpec, raw: str) -> int:
    year = int(raw)
    if year < 1:
        raise InvalidPeriodValue(period.period_type.value, period.value, "year out of range")
    return year


def _span(first: date, last: date, tz: tzinfo) -> DateRange:
    return DateRange(
        start=datetime.combine(first, time.min, tzinfo=tz),
        end=datetime.combine(last, END_OF_DAY, tzinfo=tz),
    )


def period_days(period: PeriodSpec) -> tuple[date, date]:
    """Return the first and last calendar day named by ``period``."""
    kind = period.period_type.value
    value = period.value

    if period.period_type is PeriodType.DAY:
        match = DAY_PATTERN.match(value)
        if not match:
            raise InvalidPeriodValue(kind, value, "expected YYYY-MM-DD")
        try:
            day = date(_year(period, match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError as exc:
            raise InvalidPeriodValue(kind, value, str(exc)) from exc
        return day, day

    if period.period_type is PeriodType.WEEK:
        match = WEEK_PATTERN.match(value)
        if not match:
            raise InvalidPeriodValue(kind, value, "expected YYYY-Www")
        year = _year(period, match.group(1))
        week = int(match.group(2))
        if not 1 <= week <= iso_weeks_in_year(year):
            raise InvalidPeriodValue(kind, value, f"week {week} does not exist in {year}")
        try:
            monday = iso_week_monday(year, week)
            return monday, monday + timedelta(days=6)
        except OverflowError as exc:
            raise InvalidPeriodValue(kind, value, "week out of range") from exc

    if period.period_type is PeriodType.MONTH:
        match = MONTH_PATTERN.match(value)
        if not match:
            raise InvalidPeriodValue(kind, value, "expected YYYY-MM")
        year = _year(period, match.group(1))
        month = int(match.group(2))
        if not 1 <= month <= 12:
            raise InvalidPeriodValue(kind, value, f"month {month} out of range")
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, 1), date(year, month, last_day)

    if period.period_type is PeriodType.YEAR:
        match = YEAR_PATTERN.match(value)
        if not match:
            raise InvalidPeriodValue(kind, value, "expected YYYY")
        year = _year(period, match.group(1))
        return date(year, 1, 1), date(year, 12, 31)

    raise InvalidPeriodValue(kind, value, "unsupported period type")


def resolve_period(period: PeriodSpec, tz: tzinfo) -> DateRange:
    """Map ``period`` to the inclusive range covering it in timezone ``tz``."""
    first, last = period_days(period)
    return _span(first, last, tz)
