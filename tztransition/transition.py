"""A transition from one timezone offset to another.

A timezone is described by a timeline of offset changes, and a
`TimezoneTransition` is one edge in that timeline: the UTC instant the change
happens along with the offset in effect before and after it. The local times
at which the old observance ends and the new one starts are derived from the
UTC instant and are computed on first use.

The base class does not know when the transition occurs. Subclasses supply
`at`, for example `DefinedTransition` which stores the instant directly or
`tztransition.tz_rule.RuleTransition` which derives it from a TZ rule.
"""

from __future__ import annotations

import datetime
from typing import Any, Protocol, Union, runtime_checkable

from .exceptions import TransitionInstantError
from .offset import TimezoneOffset
from .time_or_datetime import TimeOrDateTime

__all__ = [
    "HasTransitionInstant",
    "TimezoneTransition",
    "DefinedTransition",
]


@runtime_checkable
class HasTransitionInstant(Protocol):
    """An object that knows the UTC instant of a transition."""

    @property
    def at(self) -> TimeOrDateTime:
        """Return the UTC instant the transition occurs."""


class TimezoneTransition:
    """A transition from one timezone offset to another at a particular time.

    Two transitions are equal with `==` when they have the same offsets and
    their instants denote the same time, even when one was defined as a
    timestamp and the other as a datetime. `eql` additionally requires the
    instants to be defined the same way. The hash follows `==`.

    Transitions are not normally constructed directly, but created by a
    subclass that knows the instant of the change.
    """

    def __init__(
        self, offset: TimezoneOffset, previous_offset: TimezoneOffset
    ) -> None:
        """Initialize TimezoneTransition."""
        self._offset = offset
        self._previous_offset = previous_offset
        self._local_end_at: TimeOrDateTime | None = None
        self._local_start_at: TimeOrDateTime | None = None

    @property
    def offset(self) -> TimezoneOffset:
        """Return the offset this transition changes to."""
        return self._offset

    @property
    def previous_offset(self) -> TimezoneOffset:
        """Return the offset this transition changes from."""
        return self._previous_offset

    @property
    def at(self) -> TimeOrDateTime:
        """Return the UTC instant when this transition occurs."""
        raise TransitionInstantError(
            f"{self.__class__.__name__} must override at to provide the transition instant"
        )

    @property
    def utc_datetime(self) -> datetime.datetime:
        """Return the UTC time of this transition as a naive datetime."""
        return self.at.to_datetime()

    @property
    def utc_timestamp(self) -> int:
        """Return the UTC time of this transition as seconds since the epoch."""
        return self.at.to_timestamp()

    @property
    def local_end_at(self) -> TimeOrDateTime:
        """Return the local time when the previous observance ends.

        This is the instant in the frame of the previous offset.
        """
        # Threads may compute this concurrently on first access. Results are
        # always equal so the last write wins without a lock.
        if self._local_end_at is None:
            self._local_end_at = self.at.shift(self._previous_offset.utc_total_offset)
        return self._local_end_at

    @property
    def local_end(self) -> datetime.datetime:
        """Return the local time when the previous observance ends as a datetime."""
        return self.local_end_at.to_datetime()

    @property
    def local_end_timestamp(self) -> int:
        """Return the local time when the previous observance ends as a timestamp."""
        return self.local_end_at.to_timestamp()

    @property
    def local_start_at(self) -> TimeOrDateTime:
        """Return the local time when the next observance starts.

        This is the instant in the frame of the new offset.
        """
        # Same unsynchronized memoization as local_end_at.
        if self._local_start_at is None:
            self._local_start_at = self.at.shift(self._offset.utc_total_offset)
        return self._local_start_at

    @property
    def local_start(self) -> datetime.datetime:
        """Return the local time when the next observance starts as a datetime."""
        return self.local_start_at.to_datetime()

    @property
    def local_start_timestamp(self) -> int:
        """Return the local time when the next observance starts as a timestamp."""
        return self.local_start_at.to_timestamp()

    def eql(self, other: Any) -> bool:
        """Return True if equal and the instants are defined the same way."""
        return (
            isinstance(other, TimezoneTransition)
            and self.offset == other.offset
            and self.previous_offset == other.previous_offset
            and self.at.eql(other.at)
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TimezoneTransition):
            return NotImplemented
        return (
            self.offset == other.offset
            and self.previous_offset == other.previous_offset
            and self.at == other.at
        )

    def __hash__(self) -> int:
        return hash(self._offset) ^ hash(self._previous_offset) ^ hash(self.at)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.at!r}, {self._offset!r})"


class DefinedTransition(TimezoneTransition):
    """A transition that occurs at a stored UTC instant.

    The instant may be an integer timestamp, as read from compiled timezone
    data, or a datetime.
    """

    def __init__(
        self,
        offset: TimezoneOffset,
        previous_offset: TimezoneOffset,
        at: Union[TimeOrDateTime, int, datetime.datetime],
    ) -> None:
        """Initialize DefinedTransition."""
        super().__init__(offset, previous_offset)
        self._at = TimeOrDateTime.wrap(at)

    @property
    def at(self) -> TimeOrDateTime:
        """Return the UTC instant when this transition occurs."""
        return self._at
