"""
Proxy dispatcher.

A proxy is an instance of a class generated from the interface's capability
table: every method and property of the interface is replaced by a thin
forwarder into the owning ``ProxyDispatcher``. The dispatcher records each
call, asks the expectation store for a response and applies the behavior
fallback when nothing matches.

Lifecycle of a proxy::

    CONFIGURING --first call--> ACTIVE --first verification--> VERIFIED

Expectations may be added while CONFIGURING or ACTIVE. VERIFIED is terminal:
further calls or registrations raise ``LifecycleError``.
"""

from __future__ import annotations

import functools
import inspect
import itertools
import logging
import threading
import time
import types
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from understudy.errors import ConfigurationError, LifecycleError
from understudy.expectations import Expectation, ExpectationStore
from understudy.signatures import MemberKind, MethodSignature, describe_interface

logger = logging.getLogger(__name__)

# Instance attribute linking a proxy to its dispatcher
_DISPATCHER_ATTR = "_understudy_dispatcher"


class MockState(str, Enum):
    """Lifecycle states of a proxy."""

    CONFIGURING = "configuring"
    ACTIVE = "active"
    VERIFIED = "verified"


@dataclass(frozen=True)
class Invocation:
    """
    One intercepted call, exactly as it was made.

    Attributes:
        signature: Member that was called.
        args: Positional arguments as passed.
        kwargs: Keyword arguments as passed.
        arguments: Bound argument tuple in parameter order, defaults applied.
        sequence: Position in the proxy's invocation log, starting at 0.
        matched: Sequence number of the expectation that answered the call.
        timestamp: ``time.monotonic()`` at interception.
    """

    signature: MethodSignature
    args: tuple[Any, ...]
    kwargs: types.MappingProxyType
    arguments: tuple[Any, ...]
    sequence: int
    matched: int | None = None
    timestamp: float = field(default_factory=time.monotonic, compare=False)

    def __str__(self) -> str:
        rendered = [repr(a) for a in self.args]
        rendered += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return self.signature.describe(", ".join(rendered))


class ProxyDispatcher:
    """
    Routes proxy calls through the expectation store and records them.

    Args:
        interface: The faked interface.
        store: Expectation store consulted for responses.
        owner: Object returned by ``owner_of`` for this proxy (the Mock).
    """

    def __init__(self, interface: type, store: ExpectationStore, owner: Any = None):
        self.interface = interface
        self.table = describe_interface(interface)
        self.store = store
        self.owner = owner
        self.state = MockState.CONFIGURING
        self._invocations: list[Invocation] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()
        self.proxy = object.__new__(proxy_class(interface))
        object.__setattr__(self.proxy, _DISPATCHER_ATTR, self)

    def signature(self, name: str) -> MethodSignature:
        """
        Look up a member of the interface.

        Raises:
            ConfigurationError: If the interface declares no such member.
        """
        try:
            return self.table[name]
        except KeyError:
            logger.warning(f"{self.interface.__name__} has no member '{name}'")
            raise ConfigurationError(
                f"'{self.interface.__name__}' has no member '{name}'"
            ) from None

    @property
    def invocations(self) -> tuple[Invocation, ...]:
        """Snapshot of the invocation log."""
        with self._lock:
            return tuple(self._invocations)

    def ensure_configurable(self) -> None:
        """Raise ``LifecycleError`` once the proxy has been verified."""
        if self.state is MockState.VERIFIED:
            logger.warning(f"Setup attempted on verified {self.interface.__name__} proxy")
            raise LifecycleError(
                f"The {self.interface.__name__} mock was already verified; "
                "no further setup is allowed"
            )

    def mark_verified(self) -> None:
        with self._lock:
            if self.state is not MockState.VERIFIED:
                logger.debug(f"{self.interface.__name__} proxy entering VERIFIED")
                self.state = MockState.VERIFIED

    def dispatch(self, name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """
        Handle one call made through the proxy.

        Raises:
            TypeError: If the arguments do not fit the member's signature.
            LifecycleError: If the proxy was already verified.
            UnmatchedCallError: If nothing matches and the store is strict.
        """
        signature = self.table[name]
        with self._lock:
            if self.state is MockState.VERIFIED:
                logger.warning(f"Call to {signature} after verification")
                raise LifecycleError(
                    f"{signature.describe()} was called after the mock was verified"
                )
            arguments = signature.bind(args, kwargs)
            self.state = MockState.ACTIVE
            try:
                expectation = self.store.find(signature, arguments)
            except Exception as exc:
                # A failing matcher still leaves the call in the log
                logger.warning(f"Matcher failed for {signature}: {exc!r}")
                self._record(signature, args, kwargs, arguments, None)
                raise
            invocation = self._record(signature, args, kwargs, arguments, expectation)

        logger.debug(f"Intercepted {invocation}")
        if expectation is not None:
            return expectation.respond(arguments)
        return self.store.fallback(signature, arguments, invocation)

    def _record(
        self,
        signature: MethodSignature,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        arguments: tuple[Any, ...],
        expectation: Expectation | None,
    ) -> Invocation:
        # Caller holds self._lock
        invocation = Invocation(
            signature=signature,
            args=tuple(args),
            kwargs=types.MappingProxyType(dict(kwargs)),
            arguments=arguments,
            sequence=next(self._counter),
            matched=expectation.sequence if expectation is not None else None,
        )
        self._invocations.append(invocation)
        self.store.record_call(signature, expectation)
        return invocation

    def __repr__(self) -> str:
        return f"<ProxyDispatcher {self.interface.__name__} [{self.state.value}]>"


def dispatcher_of(proxy: Any) -> ProxyDispatcher:
    """
    Return the dispatcher behind a proxy object.

    Raises:
        ConfigurationError: If ``proxy`` was not created by this engine.
    """
    dispatcher = getattr(proxy, "__dict__", {}).get(_DISPATCHER_ATTR)
    if not isinstance(dispatcher, ProxyDispatcher):
        logger.warning(f"Object of type {type(proxy).__name__} is not a proxy")
        raise ConfigurationError(f"{proxy!r} is not a mocked object")
    return dispatcher


def _forwarding_method(name: str, original: Any) -> Any:
    @functools.wraps(original)
    def method(self, *args, **kwargs):
        return dispatcher_of(self).dispatch(name, args, kwargs)

    # wraps copies __isabstractmethod__; the forwarder itself is concrete
    method.__isabstractmethod__ = False
    return method


def _forwarding_property(name: str) -> property:
    def getter(self):
        return dispatcher_of(self).dispatch(name, (), {})

    getter.__name__ = name
    return property(getter)


def _proxy_repr(self) -> str:
    dispatcher = dispatcher_of(self)
    return f"<{dispatcher.interface.__name__} proxy [{dispatcher.state.value}]>"


@functools.lru_cache(maxsize=None)
def proxy_class(interface: type) -> type:
    """
    Build (once per interface) the class whose instances are proxies.

    The class subclasses the interface, so ``isinstance`` checks against an
    ABC or a Protocol keep working in the system under test. Since Python
    3.12 a runtime Protocol answers ``isinstance`` for a nominal subclass
    before probing members, so a type check never reaches a forwarder.
    """
    table = describe_interface(interface)

    def exec_body(namespace: dict[str, Any]) -> None:
        for name, signature in table.items():
            if signature.kind is MemberKind.PROPERTY:
                namespace[name] = _forwarding_property(name)
            else:
                original = inspect.getattr_static(interface, name)
                namespace[name] = _forwarding_method(name, original)
        namespace["__repr__"] = _proxy_repr
        namespace["__module__"] = __name__

    cls = types.new_class(f"{interface.__name__}Proxy", (interface,), exec_body=exec_body)
    logger.debug(f"Built proxy class {cls.__name__} with {len(table)} members")
    return cls
