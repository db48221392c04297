"""Test fixtures."""

import pytest

from tztransition import TimezoneOffset


@pytest.fixture
def std_offset() -> TimezoneOffset:
    """Fixture for a standard time offset at UTC."""
    return TimezoneOffset(utc_offset=0, abbreviation="GMT")


@pytest.fixture
def dst_offset() -> TimezoneOffset:
    """Fixture for a daylight savings offset one hour ahead of UTC."""
    return TimezoneOffset(utc_offset=0, std_offset=3600, abbreviation="BST")
