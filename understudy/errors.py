"""
Exception hierarchy for the understudy test-double engine.

Every error raised by the engine derives from ``UnderstudyError`` so that
callers can catch engine failures without also catching errors raised by
the system under test.

Key Concepts Demonstrated:
- A single base exception per library
- Subclassing ``AssertionError`` so verification failures read as test failures
- Carrying the offending invocation on the exception for diagnostics
"""

from __future__ import annotations

from typing import Any


class UnderstudyError(Exception):
    """Base class for all errors raised by the engine."""


class ConfigurationError(UnderstudyError):
    """
    An expectation or mock was configured in an invalid way.

    Raised at registration time, never deferred to the first call.
    """


class LifecycleError(UnderstudyError):
    """A call or registration arrived after the mock was verified."""


class UnmatchedCallError(UnderstudyError):
    """
    A strict mock received a call that no expectation matches.

    Attributes:
        invocation: The rejected call as it was recorded.
    """

    def __init__(self, message: str, invocation: Any = None):
        super().__init__(message)
        self.invocation = invocation


class VerificationError(UnderstudyError, AssertionError):
    """
    Recorded calls did not satisfy an expected call count.

    Subclasses ``AssertionError`` so that pytest reports it as an ordinary
    test failure rather than an error.
    """
