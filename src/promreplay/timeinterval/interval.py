"""
Recurring time interval definitions.

The YAML grammar follows Alertmanager's ``time_intervals`` so existing
mute/active interval snippets can be pasted into a replay config.

Examples:
    >>> interval = TimeInterval.model_validate(
    ...     {"weekdays": ["monday:friday"], "times": [{"start_time": "09:00", "end_time": "17:00"}]}
    ... )
    >>> interval.contains(datetime(2024, 1, 15, 10, 0))  # a Monday
    True
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = ["InclusiveRange", "TimeInterval", "TimeRange"]

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

_WEEKDAYS = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

_MONTHS = {name.lower(): number for number, name in enumerate(calendar.month_name) if name}


def _parse_minutes(value: Any, field_name: str) -> int:
    """Parse an "HH:MM" clock time to minutes since midnight."""
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string in HH:MM format")

    match = _TIME_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"{field_name} {value!r} is not in HH:MM format")
    hours, mins = int(match.group(1)), int(match.group(2))
    if mins > 59 or hours > 24:
        raise ValueError(f"{field_name} {value!r} is not a valid time of day")

    minutes = hours * 60 + mins
    if minutes > 24 * 60:
        raise ValueError(f"{field_name} {value!r} is out of range 00:00-24:00")
    return minutes


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [value]
    return list(value)


def _split_range(value: Any) -> tuple[str, str]:
    text = str(value).strip()
    if ":" in text:
        begin, _, end = text.partition(":")
        return begin.strip(), end.strip()
    return text, text


def _parse_int(token: str, kind: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"{token!r} is not a valid {kind}") from None


class TimeRange(BaseModel):
    """Time-of-day range. Start is inclusive, end is exclusive."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_minute: int = Field(alias="start_time", description="Minutes since midnight, inclusive")
    end_minute: int = Field(alias="end_time", description="Minutes since midnight, exclusive")

    @field_validator("start_minute", mode="before")
    @classmethod
    def _parse_start(cls, value: Any) -> int:
        return _parse_minutes(value, "start_time")

    @field_validator("end_minute", mode="before")
    @classmethod
    def _parse_end(cls, value: Any) -> int:
        return _parse_minutes(value, "end_time")

    @model_validator(mode="after")
    def _check_order(self) -> TimeRange:
        if self.start_minute >= self.end_minute:
            raise ValueError("start_time must be before end_time")
        return self

    def contains(self, minute_of_day: int) -> bool:
        return self.start_minute <= minute_of_day < self.end_minute


class InclusiveRange(BaseModel):
    """Closed integer range used for weekdays, days of month, months and years."""

    model_config = ConfigDict(frozen=True)

    begin: int
    end: int

    def contains(self, value: int) -> bool:
        return self.begin <= value <= self.end


def _parse_weekday_range(value: Any) -> InclusiveRange:
    begin_name, end_name = _split_range(value)
    try:
        begin, end = _WEEKDAYS[begin_name.lower()], _WEEKDAYS[end_name.lower()]
    except KeyError as e:
        raise ValueError(f"{e.args[0]!r} is not a valid weekday") from None
    if begin > end:
        raise ValueError(f"start day {begin_name!r} cannot be after end day {end_name!r}")
    return InclusiveRange(begin=begin, end=end)


def _parse_day_of_month_range(value: Any) -> InclusiveRange:
    begin_token, end_token = _split_range(value)
    begin = _parse_int(begin_token, "day of the month")
    end = _parse_int(end_token, "day of the month")

    for day in (begin, end):
        if day == 0 or day < -31 or day > 31:
            raise ValueError(f"{day} is not a valid day of the month: out of range")
    if begin < 0 and end > 0:
        raise ValueError("end day must be negative if start day is negative")

    # Negative indices are compared against the shortest month
    check_begin = 28 + begin if begin < 0 else begin
    check_end = 28 + end if end < 0 else end
    if check_begin > check_end:
        raise ValueError(f"end day {end} is before start day {begin}")
    return InclusiveRange(begin=begin, end=end)


def _parse_month(token: str) -> int:
    if token.lower() in _MONTHS:
        return _MONTHS[token.lower()]
    month = _parse_int(token, "month")
    if month < 1 or month > 12:
        raise ValueError(f"{month} is not a valid month: out of range")
    return month


def _parse_month_range(value: Any) -> InclusiveRange:
    begin_token, end_token = _split_range(value)
    begin, end = _parse_month(begin_token), _parse_month(end_token)
    if begin > end:
        raise ValueError(f"end month {end_token!r} is before start month {begin_token!r}")
    return InclusiveRange(begin=begin, end=end)


def _parse_year_range(value: Any) -> InclusiveRange:
    begin_token, end_token = _split_range(value)
    begin = _parse_int(begin_token, "year")
    end = _parse_int(end_token, "year")
    if begin <= 0 or end <= 0:
        raise ValueError("years must be positive")
    if begin > end:
        raise ValueError(f"end year {end} is before start year {begin}")
    return InclusiveRange(begin=begin, end=end)


def _days_in_month(instant: datetime) -> int:
    return calendar.monthrange(instant.year, instant.month)[1]


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class TimeInterval(BaseModel):
    """A recurring calendar/time-of-day interval.

    Every constrained category must match for an instant to be contained.
    An interval without any constraint contains every instant.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    times: list[TimeRange] = Field(default_factory=list)
    weekdays: list[InclusiveRange] = Field(default_factory=list, description="0 = sunday, 6 = saturday")
    days_of_month: list[InclusiveRange] = Field(default_factory=list)
    months: list[InclusiveRange] = Field(default_factory=list)
    years: list[InclusiveRange] = Field(default_factory=list)
    location: str | None = Field(default=None, description="IANA time zone the instant is converted to")

    @field_validator("weekdays", mode="before")
    @classmethod
    def _parse_weekdays(cls, value: Any) -> Any:
        return [_parse_weekday_range(v) if isinstance(v, str) else v for v in _as_list(value)]

    @field_validator("days_of_month", mode="before")
    @classmethod
    def _parse_days_of_month(cls, value: Any) -> Any:
        return [_parse_day_of_month_range(v) if isinstance(v, (str, int)) else v for v in _as_list(value)]

    @field_validator("months", mode="before")
    @classmethod
    def _parse_months(cls, value: Any) -> Any:
        return [_parse_month_range(v) if isinstance(v, (str, int)) else v for v in _as_list(value)]

    @field_validator("years", mode="before")
    @classmethod
    def _parse_years(cls, value: Any) -> Any:
        return [_parse_year_range(v) if isinstance(v, (str, int)) else v for v in _as_list(value)]

    @field_validator("location")
    @classmethod
    def _check_location(cls, value: str | None) -> str | None:
        if value is None or value == "Local":
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown time zone {value!r}") from None
        return value

    def is_unbounded(self) -> bool:
        """Return True if this interval contains every instant."""
        return not (self.times or self.weekdays or self.days_of_month or self.months or self.years)

    def _localize(self, instant: datetime) -> datetime:
        if self.location is None:
            # Naive instants are taken as local time
            return instant if instant.tzinfo is not None else instant.astimezone()
        if self.location == "Local":
            return instant.astimezone()
        return instant.astimezone(ZoneInfo(self.location))

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant falls inside this interval.

        Args:
            instant: Point in time to test. Naive values are treated as local time.

        Returns:
            True if every constrained category matches the instant.
        """
        t = self._localize(instant)

        if self.times:
            minute_of_day = t.hour * 60 + t.minute
            if not any(r.contains(minute_of_day) for r in self.times):
                return False

        if self.days_of_month:
            days = _days_in_month(t)
            matched = False
            for r in self.days_of_month:
                begin = days + r.begin + 1 if r.begin < 0 else r.begin
                end = days + r.end + 1 if r.end < 0 else r.end
                # Ranges starting after the end of this month never match
                if begin > days:
                    continue
                begin = _clamp(begin, -days, days)
                end = _clamp(end, -days, days)
                if begin <= t.day <= end:
                    matched = True
                    break
            if not matched:
                return False

        if self.months and not any(r.contains(t.month) for r in self.months):
            return False

        if self.weekdays:
            weekday = (t.weekday() + 1) % 7
            if not any(r.contains(weekday) for r in self.weekdays):
                return False

        if self.years and not any(r.contains(t.year) for r in self.years):
            return False

        return True
