"""
Expectation store.

Holds the configured behaviors of one fake, in registration order, together
with the counters used by verification. Lookup is "first registered match
wins": registering a new expectation never removes an earlier one, so an
override only takes effect for calls the earlier expectations do not match.

Key Concepts Demonstrated:
- Ordered rule lists with first-match-wins semantics
- Separating pure lookup (``find``/``resolve``) from bookkeeping (``record_call``)
- Loose versus strict handling of unmatched calls
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from understudy.defaults import DefaultValue, default_for, is_interface
from understudy.errors import ConfigurationError, UnmatchedCallError
from understudy.matchers import ArgumentsMatcher
from understudy.signatures import MethodSignature
from understudy.times import Times

logger = logging.getLogger(__name__)


class MockBehavior(str, Enum):
    """How a fake treats calls that no expectation matches."""

    LOOSE = "loose"
    STRICT = "strict"


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------

class Response:
    """What an expectation produces when it matches a call."""

    def produce(self, arguments: tuple[Any, ...]) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class Returns(Response):
    """Return a fixed value."""

    value: Any

    def produce(self, arguments: tuple[Any, ...]) -> Any:
        return self.value


@dataclass(frozen=True)
class ReturnsUsing(Response):
    """Return the result of calling ``func`` with the actual arguments."""

    func: Callable[..., Any]

    def produce(self, arguments: tuple[Any, ...]) -> Any:
        return self.func(*arguments)


@dataclass(frozen=True)
class Raises(Response):
    """Raise an exception instance, or a fresh instance of an exception class."""

    error: BaseException | type[BaseException]

    def produce(self, arguments: tuple[Any, ...]) -> Any:
        if isinstance(self.error, type):
            raise self.error()
        raise self.error


# -----------------------------------------------------------------------------
# Expectations
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Expectation:
    """
    One configured behavior for a member.

    Attributes:
        signature: Member the expectation applies to.
        matcher: Per-parameter argument matcher.
        sequence: Registration order within the owning store.
        response: What to produce on a match; None means "return None".
        expected: Call-count constraint checked by ``verify_all``, if any.
        callback: Called with the actual arguments before the response.
        call_count: Number of calls this expectation answered.
    """

    signature: MethodSignature
    matcher: ArgumentsMatcher
    sequence: int
    response: Response | None = None
    expected: Times | None = None
    callback: Callable[..., Any] | None = None
    call_count: int = field(default=0, init=False)

    def matches(self, arguments: tuple[Any, ...]) -> bool:
        return self.matcher.matches(arguments)

    def respond(self, arguments: tuple[Any, ...]) -> Any:
        if self.callback is not None:
            self.callback(*arguments)
        if self.response is None:
            return None
        return self.response.produce(arguments)

    def describe(self) -> str:
        return self.signature.describe(self.matcher.describe())

    def __repr__(self) -> str:
        return f"<Expectation #{self.sequence} {self.describe()}>"


@dataclass(frozen=True)
class CallCounts:
    """
    Invocation counts for one member.

    Attributes:
        total: Every call made to the member.
        by_expectation: Calls answered by each expectation, keyed by its
            registration sequence number.
    """

    total: int
    by_expectation: dict[int, int]

    @property
    def unmatched(self) -> int:
        return self.total - sum(self.by_expectation.values())


class ExpectationStore:
    """
    Ordered collection of expectations for one fake.

    Args:
        behavior: Policy for calls no expectation matches.
        default_value: Loose-mode fallback policy.
        nested_factory: Builds nested fakes for ``DefaultValue.MOCK``.
    """

    def __init__(
        self,
        behavior: MockBehavior = MockBehavior.LOOSE,
        default_value: DefaultValue = DefaultValue.EMPTY,
        nested_factory: Callable[[type], Any] | None = None,
    ):
        self.behavior = behavior
        self.default_value = default_value
        self._nested_factory = nested_factory
        self._expectations: dict[MethodSignature, list[Expectation]] = {}
        self._totals: dict[MethodSignature, int] = {}
        self._nested: dict[MethodSignature, Any] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    def register(
        self,
        signature: MethodSignature,
        matcher: ArgumentsMatcher,
        response: Response | None = None,
        expected: Times | None = None,
    ) -> Expectation:
        """
        Append a new expectation for ``signature``.

        Raises:
            ConfigurationError: If an equal matcher is already registered for
                the member, or the response does not fit the member.
        """
        with self._lock:
            existing = self._expectations.setdefault(signature, [])
            for earlier in existing:
                if earlier.matcher == matcher:
                    logger.warning(f"Duplicate expectation for {earlier.describe()}")
                    raise ConfigurationError(
                        f"{earlier.describe()} is already set up; a second "
                        "expectation with the same arguments would never match"
                    )
            self._sequence += 1
            expectation = Expectation(signature, matcher, self._sequence, expected=expected)
            if response is not None:
                self.set_response(expectation, response)
            existing.append(expectation)

        logger.debug(f"Registered {expectation!r}")
        return expectation

    def set_response(self, expectation: Expectation, response: Response) -> None:
        """Attach a response to an expectation that does not have one yet."""
        if expectation.response is not None:
            logger.warning(f"Second response for {expectation.describe()}")
            raise ConfigurationError(f"{expectation.describe()} already has a response")
        if expectation.signature.returns_none and isinstance(response, (Returns, ReturnsUsing)):
            logger.warning(f"Value response for None-returning {expectation.signature.name}")
            raise ConfigurationError(
                f"{expectation.signature.describe()} returns None and cannot be given a value"
            )
        expectation.response = response

    def find(self, signature: MethodSignature, arguments: tuple[Any, ...]) -> Expectation | None:
        """Return the first expectation matching the call, without side effects."""
        with self._lock:
            candidates = list(self._expectations.get(signature, ()))
        for expectation in candidates:
            if expectation.matches(arguments):
                return expectation
        return None

    def resolve(
        self,
        signature: MethodSignature,
        arguments: tuple[Any, ...],
        invocation: Any = None,
    ) -> Any:
        """
        Produce the response for a call.

        Returns the first matching expectation's response. Without a match a
        strict store raises and a loose store returns the default value.

        Raises:
            UnmatchedCallError: No expectation matches and behavior is STRICT.
        """
        expectation = self.find(signature, arguments)
        if expectation is not None:
            return expectation.respond(arguments)
        return self.fallback(signature, arguments, invocation)

    def fallback(
        self,
        signature: MethodSignature,
        arguments: tuple[Any, ...],
        invocation: Any = None,
    ) -> Any:
        """Apply the behavior policy to an unmatched call."""
        if self.behavior is MockBehavior.STRICT:
            shown = invocation or signature.describe(", ".join(repr(a) for a in arguments))
            logger.warning(f"Strict mock rejected unmatched call {shown}")
            raise UnmatchedCallError(
                f"{shown} invocation failed with mock behavior Strict. "
                "All invocations on the mock must have a corresponding setup.",
                invocation,
            )

        with self._lock:
            if signature in self._nested:
                return self._nested[signature]
            value = default_for(signature.return_type, self.default_value, self._nested_factory)
            if self.default_value is DefaultValue.MOCK and is_interface(signature.return_type):
                # Nested fakes are stable so they can be configured after retrieval
                self._nested[signature] = value
        logger.debug(f"Loose fallback for {signature.name}: {value!r}")
        return value

    def record_call(self, signature: MethodSignature, expectation: Expectation | None) -> None:
        """Count one intercepted call, and the expectation that answers it."""
        with self._lock:
            self._totals[signature] = self._totals.get(signature, 0) + 1
            if expectation is not None:
                expectation.call_count += 1

    def counts(self, signature: MethodSignature) -> CallCounts:
        """Total and per-expectation invocation counts for a member."""
        with self._lock:
            return CallCounts(
                total=self._totals.get(signature, 0),
                by_expectation={
                    e.sequence: e.call_count for e in self._expectations.get(signature, ())
                },
            )

    def expectations(self, signature: MethodSignature | None = None) -> list[Expectation]:
        """Registered expectations in registration order."""
        with self._lock:
            if signature is not None:
                return list(self._expectations.get(signature, ()))
            everything = [e for group in self._expectations.values() for e in group]
        return sorted(everything, key=lambda e: e.sequence)
