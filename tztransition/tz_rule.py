"""Library for parsing TZ rules and deriving transitions from them.

The footer of a TZif file holds a POSIX TZ string that describes how local
time changes after the last recorded transition. TZ supports these two
formats

No DST: std offset
  - std: Name of the timezone
  - offset: Time added to local time to get UTC
  Example: EST+5

DST: std offset dst [offset],start[/time],end[/time]
  - dst: Name of the Daylight savings time timezone
  - offset: Defaults to 1 hour ahead of STD offset if not specified
  - start & end: Time period when DST is in effect. The start/end have
    the following formats:
      Jn: A julian day between 1 and 365 (Feb 29th never counted)
      Mm.w.d:
          m: Month between 1 and 12
          d: Between 0 (Sunday) and 6 (Saturday)
          w: Between 1 and 5. Week 1 is first week d occurs
      The time field is in hh:mm:ss. The hour can be 167 to -167.

The start and end times are local times in the offset in effect just before
the change, which is how a `RuleTransition` finds its UTC instant.
"""

from __future__ import annotations

import calendar
import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from dateutil import rrule
from pydantic import ValidationError

from .exceptions import RuleParseError
from .offset import TimezoneOffset
from .time_or_datetime import TimeOrDateTime
from .transition import TimezoneTransition

__all__ = [
    "Rule",
    "RuleDate",
    "RuleDay",
    "RuleTransition",
    "parse_tz_rule",
]

_LOGGER = logging.getLogger(__name__)

_DEFAULT_TIME_DELTA = datetime.timedelta(hours=2)
_DEFAULT_DST_DELTA = 60 * 60
_LEAP_DAY_OF_YEAR = 60


def _parse_time(values: dict[str, Any]) -> datetime.timedelta | None:
    """Convert an offset from [+/-]hh[:mm[:ss]] to a timedelta.

    The dict expects groups of hour, minutes, seconds from a regex match.
    """
    if (hour := values["hour"]) is None:
        return None
    sign = 1
    if hour.startswith("+"):
        hour = hour[1:]
    elif hour.startswith("-"):
        sign = -1
        hour = hour[1:]
    minutes = values.get("minutes") or "0"
    seconds = values.get("seconds") or "0"
    return datetime.timedelta(
        seconds=sign * (int(hour) * 60 * 60 + int(minutes) * 60 + int(seconds))
    )


@dataclass
class RuleDay:
    """A date referenced in a timezone rule for a julian day."""

    day_of_year: int
    """A day of the year between 1 and 365, leap days never supported."""

    time: datetime.timedelta
    """Offset of time in current local time when the rule goes into effect, default of 02:00:00."""

    def local_datetime(self, year: int) -> datetime.datetime:
        """Return the local time the rule goes into effect in the specified year."""
        day_of_year = self.day_of_year
        if calendar.isleap(year) and day_of_year >= _LEAP_DAY_OF_YEAR:
            # Feb 29th is never counted, so skip over it
            day_of_year += 1
        return (
            datetime.datetime(year, 1, 1)
            + datetime.timedelta(days=day_of_year - 1)
            + self.time
        )


@dataclass
class RuleDate:
    """A date referenced in a timezone rule."""

    month: int
    """A month between 1 and 12."""

    day_of_week: int
    """A day of the week between 0 (Sunday) and 6 (Saturday)."""

    week_of_month: int
    """A week number of the month (1 to 5) based on the first occurrence of day_of_week."""

    time: datetime.timedelta
    """Offset of time in current local time when the rule goes into effect, default of 02:00:00."""

    def as_rrule(self, dtstart: datetime.datetime | None = None) -> rrule.rrule:
        """Return a yearly recurrence rule for the day of this timezone occurrence."""
        return rrule.rrule(
            freq=rrule.YEARLY,
            bymonth=self.month,
            byweekday=self._rrule_byday(self._rrule_week_of_month),
            dtstart=dtstart,
        )

    def local_datetime(self, year: int) -> datetime.datetime:
        """Return the local time the rule goes into effect in the specified year."""
        day = next(iter(self.as_rrule(datetime.datetime(year, 1, 1))))
        return day + self.time

    @property
    def _rrule_byday(self) -> rrule.weekday:
        """Return the dateutil weekday for this rule based on day_of_week."""
        return rrule.weekdays[(self.day_of_week - 1) % 7]

    @property
    def _rrule_week_of_month(self) -> int:
        """Return the byday modifier for the week of the month."""
        if self.week_of_month == 5:
            return -1
        return self.week_of_month


class RuleTransition(TimezoneTransition):
    """A transition that occurs on a rule date in a particular year.

    The UTC instant is derived from the local time of the rule date, which is
    expressed in the frame of the previous offset.
    """

    def __init__(
        self,
        offset: TimezoneOffset,
        previous_offset: TimezoneOffset,
        rule_date: Union[RuleDate, RuleDay],
        year: int,
    ) -> None:
        """Initialize RuleTransition."""
        super().__init__(offset, previous_offset)
        self._rule_date = rule_date
        self._year = year
        self._at: TimeOrDateTime | None = None

    @property
    def rule_date(self) -> Union[RuleDate, RuleDay]:
        """Return the rule date this transition was derived from."""
        return self._rule_date

    @property
    def year(self) -> int:
        """Return the year the rule date was evaluated in."""
        return self._year

    @property
    def at(self) -> TimeOrDateTime:
        """Return the UTC instant when this transition occurs."""
        if self._at is None:
            local = TimeOrDateTime(self._rule_date.local_datetime(self._year))
            self._at = self.previous_offset.to_utc(local)
        return self._at


@dataclass
class Rule:
    """A rule for evaluating future timezone transitions."""

    std: TimezoneOffset
    """The offset observed during standard time."""

    dst: Optional[TimezoneOffset] = None
    """The offset observed during daylight savings time."""

    dst_start: Union[RuleDate, RuleDay, None] = None
    """Describes when dst goes into effect."""

    dst_end: Union[RuleDate, RuleDay, None] = None
    """Describes when dst ends (std starts)."""

    def transitions(self, year: int) -> list[RuleTransition]:
        """Return the transitions in the specified year ordered by UTC instant."""
        if not self.dst or not self.dst_start or not self.dst_end:
            return []
        result = [
            RuleTransition(self.dst, self.std, self.dst_start, year),
            RuleTransition(self.std, self.dst, self.dst_end, year),
        ]
        result.sort(key=lambda transition: transition.at)
        _LOGGER.debug("Rule transitions for %s: %s", year, result)
        return result


# Regexp for parsing the TZ string
_OFFSET_RE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<name>(\<[+\-]?\d+\>|[a-zA-Z]+))"  # name
    r"((?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"  # offset
)
_START_END_RE_PATTERN = re.compile(
    # days in either julian (J prefix) or month.week.day (M prefix) format
    r",(J(?P<day_of_year>\d+)|M(?P<month>\d{1,2})\.(?P<week_of_month>\d)\.(?P<day_of_week>\d))"
    # time
    r"(\/(?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"
)


def _utc_offset_from_match(match: re.Match[str]) -> int | None:
    """Return the UTC offset in seconds, negating the POSIX time added to local time."""
    if (value := _parse_time(match.groupdict())) is None:
        return None
    return -int(value.total_seconds())


def _check_range(
    tz_str: str, match: re.Match[str], field: str, low: int, high: int
) -> int:
    """Return the integer value of a rule date field or raise if out of range."""
    value = int(match.group(field))
    if not low <= value <= high:
        raise RuleParseError(
            f"Unable to parse TZ string, {field} must be between {low} and {high}: {tz_str}",
            detailed_error=match.group(0),
        )
    return value


def _rule_date_from_match(
    tz_str: str, match: re.Match[str]
) -> Union[RuleDay, RuleDate]:
    """Create a rule date from a regex match."""
    if (time := _parse_time(match.groupdict())) is None:
        time = _DEFAULT_TIME_DELTA
    if match["day_of_year"] is not None:
        return RuleDay(
            day_of_year=_check_range(tz_str, match, "day_of_year", 1, 365), time=time
        )
    return RuleDate(
        month=_check_range(tz_str, match, "month", 1, 12),
        week_of_month=_check_range(tz_str, match, "week_of_month", 1, 5),
        day_of_week=_check_range(tz_str, match, "day_of_week", 0, 6),
        time=time,
    )


def parse_tz_rule(tz_str: str) -> Rule:
    """Parse the TZ string into a Rule object."""
    buffer = tz_str
    if (std_match := _OFFSET_RE_PATTERN.match(buffer)) is None:
        raise RuleParseError(f"Unable to parse TZ string: {tz_str}")
    buffer = buffer[std_match.end() :]
    if (dst_match := _OFFSET_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[dst_match.end() :]
    if (std_start := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_start.end() :]
    if (std_end := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_end.end() :]
    if (std_start is None) != (std_end is None):
        raise RuleParseError(
            f"Unable to parse TZ string, should have both or neither start and end dates: {tz_str}"
        )
    if buffer:
        raise RuleParseError(
            f"Unable to parse TZ string, unexpected trailing data: {tz_str}",
            detailed_error=buffer,
        )

    std_utc_offset = _utc_offset_from_match(std_match) or 0
    try:
        std = TimezoneOffset(
            utc_offset=std_utc_offset, abbreviation=std_match["name"]
        )
        dst = None
        if dst_match:
            dst_utc_offset = _utc_offset_from_match(dst_match)
            std_offset = (
                _DEFAULT_DST_DELTA
                if dst_utc_offset is None
                else dst_utc_offset - std_utc_offset
            )
            dst = TimezoneOffset(
                utc_offset=std_utc_offset,
                std_offset=std_offset,
                abbreviation=dst_match["name"],
            )
    except ValidationError as err:
        raise RuleParseError(
            f"Unable to parse TZ string, invalid offset: {tz_str}",
            detailed_error=str(err),
        ) from err
    rule = Rule(
        std=std,
        dst=dst,
        dst_start=_rule_date_from_match(tz_str, std_start) if std_start else None,
        dst_end=_rule_date_from_match(tz_str, std_end) if std_end else None,
    )
    _LOGGER.debug("Parsed TZ string %s: %s", tz_str, rule)
    return rule
