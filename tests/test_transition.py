"""Tests for the timezone transition library."""

from concurrent.futures import ThreadPoolExecutor
import datetime
import threading

import pytest

from tztransition import (
    DefinedTransition,
    HasTransitionInstant,
    Representation,
    TimeOrDateTime,
    TimezoneOffset,
    TimezoneTransition,
    TransitionInstantError,
)

# 2021-03-14T10:00:00 UTC
AT_DATETIME = datetime.datetime(2021, 3, 14, 10, 0, 0)
AT_TIMESTAMP = 1615716000


class CountingTransition(TimezoneTransition):
    """Transition that records how many times the instant was requested."""

    def __init__(
        self, offset: TimezoneOffset, previous_offset: TimezoneOffset, at: int
    ) -> None:
        super().__init__(offset, previous_offset)
        self._at = TimeOrDateTime(at)
        self.calls = 0

    @property
    def at(self) -> TimeOrDateTime:
        self.calls += 1
        return self._at


def test_offsets(std_offset: TimezoneOffset, dst_offset: TimezoneOffset) -> None:
    """Test the offsets before and after the transition."""
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    assert transition.offset == dst_offset
    assert transition.previous_offset == std_offset
    assert transition.at == TimeOrDateTime(AT_TIMESTAMP)
    assert transition.utc_timestamp == AT_TIMESTAMP
    assert transition.utc_datetime == AT_DATETIME


def test_at_not_implemented(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test the base transition does not know its instant."""
    transition = TimezoneTransition(dst_offset, std_offset)
    assert transition.offset == dst_offset
    assert transition.previous_offset == std_offset

    with pytest.raises(
        TransitionInstantError, match="TimezoneTransition must override at"
    ):
        transition.at
    with pytest.raises(NotImplementedError):
        transition.local_end_at
    with pytest.raises(NotImplementedError):
        transition.local_start


def test_has_transition_instant(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test concrete transitions provide an instant."""
    transition = DefinedTransition(dst_offset, std_offset, AT_DATETIME)
    assert isinstance(transition, HasTransitionInstant)
    assert isinstance(transition.at, TimeOrDateTime)


@pytest.mark.parametrize(
    "at,representation",
    [
        (AT_TIMESTAMP, Representation.TIMESTAMP),
        (AT_DATETIME, Representation.DATETIME),
        (TimeOrDateTime(AT_TIMESTAMP), Representation.TIMESTAMP),
    ],
)
def test_local_times(
    std_offset: TimezoneOffset,
    dst_offset: TimezoneOffset,
    at: int | datetime.datetime | TimeOrDateTime,
    representation: Representation,
) -> None:
    """Test local times for the end of standard time and start of daylight time."""
    transition = DefinedTransition(dst_offset, std_offset, at)

    assert transition.local_end_at.representation == representation
    assert transition.local_end == datetime.datetime(2021, 3, 14, 10, 0, 0)
    assert transition.local_end_timestamp == AT_TIMESTAMP

    assert transition.local_start_at.representation == representation
    assert transition.local_start == datetime.datetime(2021, 3, 14, 11, 0, 0)
    assert transition.local_start_timestamp == AT_TIMESTAMP + 3600


def test_local_times_negative_offset() -> None:
    """Test local times for a zone west of UTC leaving daylight savings time."""
    est = TimezoneOffset(utc_offset=-5 * 3600, abbreviation="EST")
    edt = TimezoneOffset(utc_offset=-5 * 3600, std_offset=3600, abbreviation="EDT")
    transition = DefinedTransition(est, edt, datetime.datetime(2021, 11, 7, 6, 0, 0))

    assert transition.local_end == datetime.datetime(2021, 11, 7, 2, 0, 0)
    assert transition.local_start == datetime.datetime(2021, 11, 7, 1, 0, 0)


def test_local_times_match_formula(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test local times are the instant shifted by the total offsets."""
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    assert transition.local_end_at.eql(
        transition.at.shift(std_offset.utc_total_offset)
    )
    assert transition.local_start_at.eql(
        transition.at.shift(dst_offset.utc_total_offset)
    )


def test_local_times_cached(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test local times are computed once and reused."""
    transition = CountingTransition(dst_offset, std_offset, AT_TIMESTAMP)

    local_end_at = transition.local_end_at
    assert transition.calls == 1
    assert transition.local_end_at is local_end_at
    assert transition.local_end == datetime.datetime(2021, 3, 14, 10, 0, 0)
    assert transition.calls == 1

    local_start_at = transition.local_start_at
    assert transition.calls == 2
    assert transition.local_start_at is local_start_at
    assert transition.local_start_timestamp == AT_TIMESTAMP + 3600
    assert transition.calls == 2


def test_local_end_at_concurrent_access(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test many threads reading the local end time of a new transition."""
    num_threads = 16
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    barrier = threading.Barrier(num_threads)

    def read_local_end_at() -> TimeOrDateTime:
        barrier.wait()
        return transition.local_end_at

    with ThreadPoolExecutor(max_workers=num_threads) as executor:
        futures = [executor.submit(read_local_end_at) for _ in range(num_threads)]
        results = [future.result() for future in futures]

    expected = TimeOrDateTime(AT_TIMESTAMP).shift(std_offset.utc_total_offset)
    assert all(result.eql(expected) for result in results)
    assert transition.local_end_at.eql(expected)


def test_equality(std_offset: TimezoneOffset, dst_offset: TimezoneOffset) -> None:
    """Test transitions compare by offsets and instant."""
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    same = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)

    assert transition == same
    assert transition.eql(same)
    assert transition == CountingTransition(dst_offset, std_offset, AT_TIMESTAMP)

    assert transition != DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP + 1)
    assert transition != DefinedTransition(std_offset, dst_offset, AT_TIMESTAMP)
    assert transition != DefinedTransition(
        dst_offset,
        TimezoneOffset(utc_offset=0, abbreviation="UTC"),
        AT_TIMESTAMP,
    )
    assert transition != AT_TIMESTAMP
    assert not transition.eql(AT_TIMESTAMP)


def test_equality_across_representations(
    std_offset: TimezoneOffset, dst_offset: TimezoneOffset
) -> None:
    """Test a timestamp and datetime for the same instant are equal but not eql."""
    timestamp = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    value = DefinedTransition(dst_offset, std_offset, AT_DATETIME)

    assert timestamp == value
    assert not timestamp.eql(value)
    assert not value.eql(timestamp)
    assert hash(timestamp) == hash(value)
    assert len({timestamp, value}) == 1


def test_hash(std_offset: TimezoneOffset, dst_offset: TimezoneOffset) -> None:
    """Test the hash combines the offsets and instant."""
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    expected = hash(dst_offset) ^ hash(std_offset) ^ hash(transition.at)
    assert hash(transition) == expected
    assert hash(transition) == hash(transition)
    assert hash(transition) == hash(
        DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    )


def test_repr(std_offset: TimezoneOffset, dst_offset: TimezoneOffset) -> None:
    """Test the debug representation includes the instant and offset."""
    transition = DefinedTransition(dst_offset, std_offset, AT_TIMESTAMP)
    assert repr(transition) == (
        "DefinedTransition(TimeOrDateTime(timestamp=1615716000), "
        f"{dst_offset!r})"
    )
    assert "abbreviation='BST'" in repr(transition)


def test_transition_before_datetime_range() -> None:
    """Test a transition at the first TZif sentinel instant."""
    lmt = TimezoneOffset(utc_offset=-17762, abbreviation="LMT")
    est = TimezoneOffset(utc_offset=-5 * 3600, abbreviation="EST")
    transition = DefinedTransition(est, lmt, -(2**59))
    same = DefinedTransition(est, lmt, -(2**59))

    assert transition.local_end_at.value == -(2**59) - 17762
    assert transition.local_start_at.value == -(2**59) - 5 * 3600
    assert transition == same
    assert transition.eql(same)
    assert hash(transition) == hash(same)
    assert len({transition, same}) == 1
    assert transition != DefinedTransition(est, lmt, AT_DATETIME)
