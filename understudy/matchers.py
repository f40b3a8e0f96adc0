"""
Argument matchers.

A matcher is a side-effect free predicate over a single argument value.
Matchers compose with ``&`` into conjunctions, and an ``ArgumentsMatcher``
combines one matcher per parameter to decide whether a whole call matches
an expectation.

The ``It`` namespace is the public entry point used inside setup and
verify lambdas::

    mock.setup(lambda ld: ld.get_directory_by_logger_name(It.is_any(str)))
    mock.verify(lambda lw: lw.write(It.is_regex(r"^Hello")), Times.once())

Key Concepts Demonstrated:
- Value equality versus reference identity
- Type-based wildcards
- Predicate composition
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any


class Matcher:
    """Base class for single-argument matchers."""

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __and__(self, other: Any) -> AllOf:
        return AllOf((self, as_matcher(other)))

    def __repr__(self) -> str:
        return self.describe()


@dataclass(frozen=True, eq=True, repr=False)
class Exact(Matcher):
    """Matches values equal to (or identical with) the expected value."""

    expected: Any

    def matches(self, value: Any) -> bool:
        if value is self.expected:
            return True
        try:
            return bool(value == self.expected)
        except Exception:
            # Some types (numpy arrays, for example) refuse boolean equality
            return False

    def describe(self) -> str:
        return repr(self.expected)

    def __hash__(self) -> int:
        try:
            return hash(self.expected)
        except TypeError:
            return id(self.expected)


@dataclass(frozen=True, eq=False, repr=False)
class Same(Matcher):
    """Matches only the very same object."""

    expected: Any

    def matches(self, value: Any) -> bool:
        return value is self.expected

    def describe(self) -> str:
        return f"Same({self.expected!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Same) and other.expected is self.expected

    def __hash__(self) -> int:
        return id(self.expected)


@dataclass(frozen=True, repr=False)
class AnyValue(Matcher):
    """
    Matches any value of a type.

    With ``kind=None`` everything matches, including None.
    """

    kind: type | tuple[type, ...] | None = None

    def matches(self, value: Any) -> bool:
        if self.kind is None:
            return True
        return isinstance(value, self.kind)

    def describe(self) -> str:
        if self.kind is None:
            return "Any()"
        if isinstance(self.kind, tuple):
            names = ", ".join(k.__name__ for k in self.kind)
            return f"Any({names})"
        return f"Any({self.kind.__name__})"


@dataclass(frozen=True, eq=False, repr=False)
class Predicate(Matcher):
    """Matches values for which a user function returns a truthy result."""

    func: Callable[[Any], Any]
    label: str | None = None

    def matches(self, value: Any) -> bool:
        return bool(self.func(value))

    def describe(self) -> str:
        name = self.label or getattr(self.func, "__name__", "predicate")
        return f"Is({name})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Predicate) and other.func is self.func

    def __hash__(self) -> int:
        return id(self.func)


@dataclass(frozen=True, repr=False)
class In(Matcher):
    """Matches values contained (or, if negated, not contained) in a set of options."""

    options: tuple[Any, ...]
    negate: bool = False

    def matches(self, value: Any) -> bool:
        found = any(Exact(option).matches(value) for option in self.options)
        return not found if self.negate else found

    def describe(self) -> str:
        name = "NotIn" if self.negate else "In"
        return f"{name}({', '.join(repr(o) for o in self.options)})"


@dataclass(frozen=True, repr=False)
class Regex(Matcher):
    """Matches strings in which the pattern can be found."""

    pattern: str
    flags: int = 0

    def matches(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return re.search(self.pattern, value, self.flags) is not None

    def describe(self) -> str:
        return f"Regex({self.pattern!r})"


@dataclass(frozen=True, repr=False)
class NotNone(Matcher):
    def matches(self, value: Any) -> bool:
        return value is not None

    def describe(self) -> str:
        return "NotNone()"


@dataclass(frozen=True, repr=False)
class AllOf(Matcher):
    """Conjunction of matchers; all must accept the value."""

    matchers: tuple[Matcher, ...]

    def matches(self, value: Any) -> bool:
        return all(m.matches(value) for m in self.matchers)

    def describe(self) -> str:
        return " & ".join(m.describe() for m in self.matchers)

    def __and__(self, other: Any) -> AllOf:
        return AllOf(self.matchers + (as_matcher(other),))


def as_matcher(value: Any) -> Matcher:
    """Wrap a raw value in an ``Exact`` matcher unless it already is a matcher."""
    if isinstance(value, Matcher):
        return value
    return Exact(value)


@dataclass(frozen=True, repr=False)
class ArgumentsMatcher:
    """
    One matcher per parameter, applied in parameter order.

    Two ``ArgumentsMatcher`` objects compare equal when their per-parameter
    matchers do, which is how duplicate registrations are detected.
    """

    matchers: tuple[Matcher, ...] = ()

    @classmethod
    def from_values(cls, values: Iterable[Any]) -> ArgumentsMatcher:
        return cls(tuple(as_matcher(v) for v in values))

    def matches(self, arguments: tuple[Any, ...]) -> bool:
        if len(arguments) != len(self.matchers):
            return False
        return all(m.matches(a) for m, a in zip(self.matchers, arguments))

    def describe(self) -> str:
        return ", ".join(m.describe() for m in self.matchers)

    def __repr__(self) -> str:
        return f"({self.describe()})"


class It:
    """Factory namespace for argument matchers."""

    @staticmethod
    def is_any(kind: type | tuple[type, ...] | None = None) -> Matcher:
        return AnyValue(kind)

    @staticmethod
    def is_value(expected: Any) -> Matcher:
        return Exact(expected)

    @staticmethod
    def is_same(expected: Any) -> Matcher:
        return Same(expected)

    @staticmethod
    def is_(predicate: Callable[[Any], Any], label: str | None = None) -> Matcher:
        return Predicate(predicate, label)

    @staticmethod
    def is_in(*options: Any) -> Matcher:
        return In(tuple(options))

    @staticmethod
    def is_not_in(*options: Any) -> Matcher:
        return In(tuple(options), negate=True)

    @staticmethod
    def is_regex(pattern: str, flags: int = 0) -> Matcher:
        return Regex(pattern, flags)

    @staticmethod
    def is_not_none() -> Matcher:
        return NotNone()

    @staticmethod
    def all_of(*matchers: Any) -> Matcher:
        return AllOf(tuple(as_matcher(m) for m in matchers))
