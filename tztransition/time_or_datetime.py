"""A point in time held as either a timestamp or a calendar datetime.

Timezone data arrives in two shapes. Compiled TZif data stores transitions as
integer seconds since the epoch, while rules and hand written definitions
describe them with calendar fields. A `TimeOrDateTime` keeps whichever form
it was created with and converts to the other on demand, so that a caller
can tell how a value was defined without being forced to pick a form early.

Values are naive. A `TimeOrDateTime` built from a UTC instant denotes UTC,
and one built by shifting into a local frame denotes local wall clock time.
"""

from __future__ import annotations

import datetime
import enum
from typing import Any, Union

__all__ = [
    "Representation",
    "TimeOrDateTime",
]

_EPOCH = datetime.datetime(1970, 1, 1)
_ONE_SECOND = datetime.timedelta(seconds=1)


class Representation(str, enum.Enum):
    """The form a `TimeOrDateTime` was defined with."""

    TIMESTAMP = "TIMESTAMP"
    DATETIME = "DATETIME"


class TimeOrDateTime:
    """A naive instant stored as a timestamp or as a datetime.

    Two notions of equality are supported. `==` (and `same_instant`) compare
    the instant that is denoted regardless of how it is stored, while `eql`
    (and `same_representation`) also require the same form. The hash follows
    `==` so values can be mixed freely in sets and dicts.
    """

    __slots__ = ("_representation", "_timestamp", "_datetime")

    def __init__(self, value: Union[int, datetime.datetime]) -> None:
        """Initialize TimeOrDateTime, prefer `wrap` to also accept wrapped values."""
        self._timestamp: int | None = None
        self._datetime: datetime.datetime | None = None
        if isinstance(value, bool):
            raise TypeError(f"Expected int or datetime, got bool: {value!r}")
        if isinstance(value, int):
            self._representation = Representation.TIMESTAMP
            self._timestamp = value
        elif isinstance(value, datetime.datetime):
            if value.tzinfo is not None:
                value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
            self._representation = Representation.DATETIME
            self._datetime = value
        else:
            raise TypeError(
                f"Expected int or datetime, got {type(value).__name__}: {value!r}"
            )

    @classmethod
    def wrap(cls, value: TimeOrDateTime | int | datetime.datetime) -> TimeOrDateTime:
        """Return value if already wrapped, otherwise wrap it."""
        if isinstance(value, TimeOrDateTime):
            return value
        return cls(value)

    @property
    def representation(self) -> Representation:
        """Return the form this value was created with."""
        return self._representation

    @property
    def value(self) -> int | datetime.datetime:
        """Return the originally wrapped value."""
        if self._representation == Representation.TIMESTAMP:
            return self.to_timestamp()
        return self.to_datetime()

    def to_timestamp(self) -> int:
        """Return the number of whole seconds since the epoch, rounding down."""
        if self._timestamp is None:
            # Benign race: every thread computes the same value
            self._timestamp = (self.to_datetime() - _EPOCH) // _ONE_SECOND
        return self._timestamp

    def to_datetime(self) -> datetime.datetime:
        """Return the value as a naive datetime."""
        if self._datetime is None:
            self._datetime = _EPOCH + datetime.timedelta(seconds=self.to_timestamp())
        return self._datetime

    @property
    def year(self) -> int:
        """Return the calendar year."""
        return self.to_datetime().year

    @property
    def month(self) -> int:
        """Return the calendar month between 1 and 12."""
        return self.to_datetime().month

    @property
    def day(self) -> int:
        """Return the day of the month."""
        return self.to_datetime().day

    @property
    def hour(self) -> int:
        """Return the hour of the day."""
        return self.to_datetime().hour

    @property
    def minute(self) -> int:
        """Return the minute of the hour."""
        return self.to_datetime().minute

    @property
    def second(self) -> int:
        """Return the second of the minute."""
        return self.to_datetime().second

    @property
    def microsecond(self) -> int:
        """Return the microsecond, always zero for a timestamp."""
        if self._representation == Representation.TIMESTAMP:
            return 0
        return self.to_datetime().microsecond

    def _instant_key(self) -> tuple[int, int]:
        """Return a key for the denoted instant without converting timestamps."""
        return (self.to_timestamp(), self.microsecond)

    def shift(self, seconds: int) -> TimeOrDateTime:
        """Return a new value moved by the number of seconds, in the same form.

        This is plain arithmetic on the stored value, so moving a UTC instant
        by a UTC offset gives the local wall clock time for that offset.
        """
        if self._representation == Representation.TIMESTAMP:
            return TimeOrDateTime(self.to_timestamp() + seconds)
        return TimeOrDateTime(self.to_datetime() + datetime.timedelta(seconds=seconds))

    def same_instant(self, other: TimeOrDateTime) -> bool:
        """Return True if both values denote the same instant."""
        return self._instant_key() == other._instant_key()

    def same_representation(self, other: TimeOrDateTime) -> bool:
        """Return True if both values have the same form and the same value."""
        return (
            self._representation == other.representation and self.value == other.value
        )

    def eql(self, other: Any) -> bool:
        """Return True if other is a TimeOrDateTime with the same form and value."""
        return isinstance(other, TimeOrDateTime) and self.same_representation(other)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TimeOrDateTime):
            return NotImplemented
        return self.same_instant(other)

    def __hash__(self) -> int:
        # Timestamps may be outside the range of a datetime
        if self.microsecond == 0:
            return hash(self.to_timestamp())
        return hash(self.to_datetime())

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, TimeOrDateTime):
            return NotImplemented
        return self._instant_key() < other._instant_key()

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, TimeOrDateTime):
            return NotImplemented
        return self._instant_key() > other._instant_key()

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, TimeOrDateTime):
            return NotImplemented
        return self._instant_key() <= other._instant_key()

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, TimeOrDateTime):
            return NotImplemented
        return self._instant_key() >= other._instant_key()

    def __str__(self) -> str:
        return self.to_datetime().isoformat()

    def __repr__(self) -> str:
        if self._representation == Representation.TIMESTAMP:
            return f"{self.__class__.__name__}(timestamp={self.to_timestamp()})"
        return f"{self.__class__.__name__}(datetime={self.to_datetime().isoformat()})"
