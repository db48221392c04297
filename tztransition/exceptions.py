"""Exceptions for the tztransition library."""


class TimezoneTransitionError(Exception):
    """Base exception for all tztransition errors."""


class TransitionInstantError(TimezoneTransitionError, NotImplementedError):
    """Exception raised when a transition has no UTC instant.

    The base `TimezoneTransition` does not know when it occurs, so a
    subclass must provide `at`. Seeing this error means a transition class
    was constructed that never supplied one.
    """


class RuleParseError(TimezoneTransitionError, ValueError):
    """Exception raised when parsing a POSIX TZ rule string.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the part of the string that could
    not be parsed.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the RuleParseError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error
