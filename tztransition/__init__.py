"""Library for timezone transitions.

A `TimezoneTransition` records the instant a timezone changes from one
`TimezoneOffset` to another, and derives the local times at which the old
observance ends and the new one starts. Instants are `TimeOrDateTime` values
which remember whether they were defined as a timestamp or a datetime.
"""

from .exceptions import RuleParseError, TimezoneTransitionError, TransitionInstantError
from .offset import TimezoneOffset
from .time_or_datetime import Representation, TimeOrDateTime
from .transition import DefinedTransition, HasTransitionInstant, TimezoneTransition
from .tz_rule import Rule, RuleTransition, parse_tz_rule

__all__ = [
    "DefinedTransition",
    "HasTransitionInstant",
    "Representation",
    "Rule",
    "RuleParseError",
    "RuleTransition",
    "TimeOrDateTime",
    "TimezoneOffset",
    "TimezoneTransition",
    "TimezoneTransitionError",
    "TransitionInstantError",
    "parse_tz_rule",
]
