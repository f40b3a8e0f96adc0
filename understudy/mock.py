"""
Fluent mock API.

``Mock`` ties together a proxy, its expectation store and its verifier.
Members are selected with small lambdas that receive a recorder standing in
for the interface::

    mock = Mock(ILoggerDependency)
    mock.setup(lambda ld: ld.get_directory_by_logger_name(It.is_any(str))) \\
        .returns_using(lambda name: "C:\\\\" + name)

    directory = mock.object.get_directory_by_logger_name("Foo")   # "C:\\Foo"
    mock.verify(lambda ld: ld.get_directory_by_logger_name("Foo"), Times.once())

``Mock.of`` builds a ready-to-use stub from a functional specification and
returns the proxy itself; ``Mock.get`` recovers the mock from such a proxy.

Key Concepts Demonstrated:
- Stubs (canned answers) versus mocks (verified interactions)
- Loose versus strict behavior
- Fluent builder APIs in place of expression trees
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from understudy.config import get_config
from understudy.defaults import DefaultValue
from understudy.errors import ConfigurationError
from understudy.expectations import (
    CallCounts,
    Expectation,
    ExpectationStore,
    MockBehavior,
    Raises,
    Returns,
    ReturnsUsing,
)
from understudy.matchers import AnyValue, ArgumentsMatcher
from understudy.proxy import Invocation, MockState, ProxyDispatcher, dispatcher_of
from understudy.signatures import MemberKind, MethodSignature
from understudy.times import Times
from understudy.verifier import Verifier

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _coerce(enum_type: type[E], value: Any) -> E:
    try:
        return enum_type(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        logger.warning(f"Invalid {enum_type.__name__} {value!r}")
        raise ConfigurationError(
            f"Invalid {enum_type.__name__} {value!r}. Must be one of: {choices}"
        ) from None


# -----------------------------------------------------------------------------
# Member selection
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CallSpec:
    """A member plus the argument matcher selected inside a setup/verify lambda."""

    signature: MethodSignature
    matcher: ArgumentsMatcher

    def __str__(self) -> str:
        return self.signature.describe(self.matcher.describe())


class _Clause:
    """
    One ``member(...) == value`` clause of a functional specification.

    Comparing the clause registers the expectation and evaluates to True, so
    clauses can be chained with ``and``.
    """

    __hash__ = None

    def __init__(self, spec: CallSpec, register: Callable[[CallSpec, Any], None]):
        self._spec = spec
        self._register = register

    def __eq__(self, value: object) -> bool:
        self._register(self._spec, value)
        return True

    def __ne__(self, value: object) -> bool:
        logger.warning(f"Specification used '!=' on {self._spec}")
        raise ConfigurationError(
            f"A specification clause must use '==', not '!=': {self._spec}"
        )

    def __repr__(self) -> str:
        return f"<Clause {self._spec}>"


class _Recorder:
    """Stands in for the interface inside setup, verify and specification lambdas."""

    def __init__(
        self,
        dispatcher: ProxyDispatcher,
        register: Callable[[CallSpec, Any], None] | None = None,
    ):
        self._dispatcher = dispatcher
        self._register = register

    def __getattr__(self, name: str) -> Any:
        signature = self._dispatcher.signature(name)
        if signature.kind is MemberKind.PROPERTY:
            return self._select(signature, (), {})

        def select(*args: Any, **kwargs: Any) -> Any:
            return self._select(signature, args, kwargs)

        select.__name__ = name
        return select

    def _select(self, signature: MethodSignature, args: tuple, kwargs: dict) -> Any:
        try:
            values = signature.bind(args, kwargs)
        except TypeError as exc:
            logger.warning(f"Arguments do not fit {signature}: {exc}")
            raise ConfigurationError(f"Invalid arguments for {signature}: {exc}") from exc
        spec = CallSpec(signature, ArgumentsMatcher.from_values(values))
        if self._register is not None:
            return _Clause(spec, self._register)
        return spec


# -----------------------------------------------------------------------------
# Setup builder
# -----------------------------------------------------------------------------

class Setup:
    """
    Fluent builder returned by ``Mock.setup``.

    The expectation is registered as soon as the setup is created; builder
    calls only refine it.
    """

    def __init__(self, store: ExpectationStore, expectation: Expectation):
        self._store = store
        self.expectation = expectation

    def returns(self, value: Any) -> Setup:
        """Answer matching calls with a fixed value."""
        self._store.set_response(self.expectation, Returns(value))
        return self

    def returns_using(self, func: Callable[..., Any]) -> Setup:
        """Answer matching calls with ``func(*actual_arguments)``."""
        self._store.set_response(self.expectation, ReturnsUsing(func))
        return self

    def raises(self, error: BaseException | type[BaseException]) -> Setup:
        """Raise ``error`` from matching calls."""
        self._store.set_response(self.expectation, Raises(error))
        return self

    def callback(self, func: Callable[..., Any]) -> Setup:
        """Call ``func(*actual_arguments)`` before producing the response."""
        if self.expectation.callback is not None:
            raise ConfigurationError(f"{self.expectation.describe()} already has a callback")
        self.expectation.callback = func
        return self

    def verifiable(self, times: Times | None = None) -> Setup:
        """Mark the expectation for ``verify_all``, by default requiring at least one call."""
        self.expectation.expected = times or Times.at_least_once()
        return self

    def __repr__(self) -> str:
        return f"<Setup {self.expectation.describe()}>"


# -----------------------------------------------------------------------------
# Mock
# -----------------------------------------------------------------------------

class Mock:
    """
    A test double for ``interface``.

    Args:
        interface: Protocol or abstract class to fake.
        behavior: ``MockBehavior`` (or its value); defaults to configuration.
        default_value: ``DefaultValue`` policy; defaults to configuration.
        name: Label used in log messages.
    """

    def __init__(
        self,
        interface: type,
        behavior: MockBehavior | str | None = None,
        default_value: DefaultValue | str | None = None,
        name: str | None = None,
    ):
        settings = get_config()
        self.behavior = _coerce(MockBehavior, behavior or settings.DEFAULT_BEHAVIOR)
        self.default_value = _coerce(DefaultValue, default_value or settings.DEFAULT_VALUE)
        self.name = name or interface.__name__
        self._store = ExpectationStore(self.behavior, self.default_value, self._nested_mock)
        self._dispatcher = ProxyDispatcher(interface, self._store, owner=self)
        self._verifier = Verifier(self._dispatcher)
        logger.info(f"Created {self.behavior.value} mock '{self.name}'")

    # -- accessors -------------------------------------------------------------

    @property
    def interface(self) -> type:
        return self._dispatcher.interface

    @property
    def object(self) -> Any:
        """The proxy to hand to the system under test."""
        return self._dispatcher.proxy

    @property
    def state(self) -> MockState:
        return self._dispatcher.state

    @property
    def invocations(self) -> tuple[Invocation, ...]:
        return self._dispatcher.invocations

    def expectations(self) -> list[Expectation]:
        return self._store.expectations()

    def counts(self, member: str) -> CallCounts:
        """Invocation counts for the member called ``member``."""
        return self._store.counts(self._dispatcher.signature(member))

    # -- configuration ---------------------------------------------------------

    def setup(self, member: Callable[[Any], Any]) -> Setup:
        """
        Register an expectation for the member selected by ``member``.

        Args:
            member: Lambda receiving a recorder, e.g.
                ``lambda lw: lw.write(It.is_any(str))``.

        Returns:
            Builder for the response and verification constraint.
        """
        self._dispatcher.ensure_configurable()
        spec = self._capture(member)
        expectation = self._store.register(spec.signature, spec.matcher)
        return Setup(self._store, expectation)

    def _register_value(self, spec: CallSpec, value: Any) -> None:
        self._dispatcher.ensure_configurable()
        self._store.register(spec.signature, spec.matcher, Returns(value))

    def _register_member(self, name: str, value: Any) -> None:
        signature = self._dispatcher.signature(name)
        matcher = ArgumentsMatcher(tuple(AnyValue() for _ in signature.parameter_names))
        self._register_value(CallSpec(signature, matcher), value)

    def _capture(self, member: Callable[[Any], Any]) -> CallSpec:
        spec = member(_Recorder(self._dispatcher))
        if not isinstance(spec, CallSpec):
            logger.warning(f"Member selector returned {spec!r}")
            raise ConfigurationError(
                "The lambda must access exactly one member of the mock, "
                "e.g. lambda lw: lw.write(It.is_any(str))"
            )
        return spec

    def _nested_mock(self, interface: type) -> Any:
        nested = Mock(interface, MockBehavior.LOOSE, self.default_value, name=f"{self.name}.{interface.__name__}")
        return nested.object

    # -- verification ----------------------------------------------------------

    def verify(self, member: Callable[[Any], Any], times: Times | None = None) -> int:
        """
        Assert that calls matching ``member`` happened ``times`` (default: at least once).

        Returns:
            Number of matching calls.
        """
        spec = self._capture(member)
        return self._verifier.verify(spec.signature, spec.matcher, times)

    def verify_all(self) -> None:
        """Assert every setup marked ``verifiable`` got its expected number of calls."""
        self._verifier.verify_all()

    def verify_no_other_calls(self) -> None:
        self._verifier.verify_no_other_calls()

    # -- functional construction -----------------------------------------------

    @staticmethod
    def of(
        interface: type,
        specification: Callable[[Any], Any] | None = None,
        *,
        behavior: MockBehavior | str | None = None,
        default_value: DefaultValue | str | None = None,
        **members: Any,
    ) -> Any:
        """
        Create a stub and return the proxy itself.

        Args:
            interface: Interface to fake.
            specification: Function whose ``member(...) == value`` clauses,
                joined with ``and``, each register one expectation.
            behavior: Behavior of the underlying mock.
            default_value: Fallback policy of the underlying mock.
            **members: Shortcut for members answering ``value`` for any
                arguments, e.g. ``default_logger="DefaultLogger"``.

        Raises:
            ConfigurationError: If the specification evaluates falsy.
        """
        mock = Mock(interface, behavior, default_value)
        if specification is not None:
            mock.apply(specification)
        for name, value in members.items():
            mock._register_member(name, value)
        return mock.object

    def apply(self, specification: Callable[[Any], Any]) -> None:
        """Register every clause of a functional specification on this mock."""
        result = specification(_Recorder(self._dispatcher, self._register_value))
        if not result or isinstance(result, _Clause):
            logger.warning(f"Specification for '{self.name}' evaluated to {result!r}")
            raise ConfigurationError(
                "A specification must be 'member(...) == value' clauses joined with 'and'"
            )

    @staticmethod
    def get(proxy: Any) -> Mock:
        """
        Return the mock that owns ``proxy``.

        Raises:
            ConfigurationError: If ``proxy`` is not a mocked object.
        """
        owner = dispatcher_of(proxy).owner
        if not isinstance(owner, Mock):
            raise ConfigurationError(f"{proxy!r} is not owned by a Mock")
        return owner

    def __repr__(self) -> str:
        return f"<Mock '{self.name}' {self.behavior.value} [{self.state.value}]>"
