"""
understudy: a minimal test-double engine.

Creates fakes of an interface, programs their answers per member and
argument pattern, and verifies how the system under test used them.

Example:
    mock = Mock(ILogWriter)
    Logger(mock.object).write_line("Hello, logger!")
    mock.verify(lambda lw: lw.write(It.is_any(str)), Times.once())
"""

import logging

from understudy.defaults import DefaultValue
from understudy.errors import (
    ConfigurationError,
    LifecycleError,
    UnderstudyError,
    UnmatchedCallError,
    VerificationError,
)
from understudy.expectations import CallCounts, Expectation, ExpectationStore, MockBehavior
from understudy.matchers import ArgumentsMatcher, It, Matcher
from understudy.mock import CallSpec, Mock, Setup
from understudy.proxy import Invocation, MockState, ProxyDispatcher
from understudy.repository import MockQuery, MockRepository
from understudy.signatures import MemberKind, MethodSignature, describe_interface
from understudy.times import Times
from understudy.verifier import Verifier

# Applications configure handlers; the engine only emits records
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ArgumentsMatcher",
    "CallCounts",
    "CallSpec",
    "ConfigurationError",
    "DefaultValue",
    "Expectation",
    "ExpectationStore",
    "Invocation",
    "It",
    "LifecycleError",
    "Matcher",
    "MemberKind",
    "MethodSignature",
    "Mock",
    "MockBehavior",
    "MockQuery",
    "MockRepository",
    "MockState",
    "ProxyDispatcher",
    "Setup",
    "Times",
    "UnderstudyError",
    "UnmatchedCallError",
    "VerificationError",
    "Verifier",
    "describe_interface",
]
