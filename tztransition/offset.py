"""Library for the UTC offsets observed by a timezone."""

from __future__ import annotations

import datetime
import re
from typing import Union

from pydantic import BaseModel, ConfigDict, field_validator

from .time_or_datetime import TimeOrDateTime

__all__ = [
    "TimezoneOffset",
]

UTC_OFFSET_REGEX = re.compile(r"^([-+]?)([0-9]{2})([0-9]{2})([0-9]{2})?$")

_MAX_OFFSET = 24 * 60 * 60


class TimezoneOffset(BaseModel):
    """An offset from UTC observed by a timezone for some period of time.

    The total offset is split into the standard offset of the zone and the
    extra amount added while daylight savings time is observed.
    """

    model_config = ConfigDict(frozen=True)

    utc_offset: int
    """Number of seconds added to UTC to determine standard time."""

    std_offset: int = 0
    """Number of seconds added to standard time, non-zero during DST."""

    abbreviation: str
    """A designation string e.g. EST or <+0330>."""

    @field_validator("utc_offset", "std_offset")
    @classmethod
    def verify_offset_range(cls, value: int) -> int:
        """Validate that an offset is less than a day."""
        if abs(value) >= _MAX_OFFSET:
            raise ValueError(f"Offset must be less than a day: {value}")
        return value

    @classmethod
    def from_utc_offset_str(
        cls, value: str, abbreviation: str, std_offset: int = 0
    ) -> TimezoneOffset:
        """Create an offset from a [+-]HHMM[SS] string of the total offset."""
        if not (match := UTC_OFFSET_REGEX.fullmatch(value)):
            raise ValueError(f"Expected value to match UTC-OFFSET pattern: {value}")
        sign, hours, minutes, seconds = match.groups()
        total = int(hours) * 3600 + int(minutes) * 60 + int(seconds or 0)
        if sign == "-":
            total = -total
        return cls(
            utc_offset=total - std_offset,
            std_offset=std_offset,
            abbreviation=abbreviation,
        )

    @property
    def utc_total_offset(self) -> int:
        """Return the number of seconds added to UTC to determine local time."""
        return self.utc_offset + self.std_offset

    @property
    def utc_total_offset_str(self) -> str:
        """Return the total offset in [+-]HHMM format, with seconds if present."""
        total = self.utc_total_offset
        sign = "-" if total < 0 else "+"
        hours, remainder = divmod(abs(total), 3600)
        minutes, seconds = divmod(remainder, 60)
        result = f"{sign}{hours:02}{minutes:02}"
        if seconds:
            result += f"{seconds:02}"
        return result

    @property
    def dst(self) -> bool:
        """Return True if daylight savings time is observed for this offset."""
        return self.std_offset != 0

    def to_local(
        self, utc: Union[TimeOrDateTime, int, datetime.datetime]
    ) -> TimeOrDateTime:
        """Convert a UTC time to local time for this offset."""
        return TimeOrDateTime.wrap(utc).shift(self.utc_total_offset)

    def to_utc(
        self, local: Union[TimeOrDateTime, int, datetime.datetime]
    ) -> TimeOrDateTime:
        """Convert a local time for this offset to UTC."""
        return TimeOrDateTime.wrap(local).shift(-self.utc_total_offset)
