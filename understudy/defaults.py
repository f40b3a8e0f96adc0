"""
Default values returned by loose mocks for unmatched calls.
"""

from __future__ import annotations

import abc
import collections.abc
import inspect
import types
import typing
from collections.abc import Callable
from enum import Enum
from typing import Any

from understudy.signatures import UNANNOTATED


class DefaultValue(str, Enum):
    """
    Fallback policy for unmatched calls on a loose mock.

    EMPTY returns an empty value of the declared return type; MOCK does the
    same but returns a nested loose fake when the return type is itself an
    interface.
    """

    EMPTY = "empty"
    MOCK = "mock"


_EMPTY_BY_TYPE: dict[Any, Callable[[], Any]] = {
    str: str,
    bool: bool,
    int: int,
    float: float,
    complex: complex,
    bytes: bytes,
    bytearray: bytearray,
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    collections.abc.Iterable: tuple,
    collections.abc.Iterator: lambda: iter(()),
    collections.abc.Collection: tuple,
    collections.abc.Sequence: tuple,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


def is_interface(annotation: Any) -> bool:
    """True for Protocol classes and abstract base classes with abstract members."""
    if not inspect.isclass(annotation) or annotation in _EMPTY_BY_TYPE:
        return False
    if getattr(annotation, "_is_protocol", False):
        return True
    return isinstance(annotation, abc.ABCMeta) and bool(
        getattr(annotation, "__abstractmethods__", ())
    )


def empty_value(annotation: Any) -> Any:
    """
    Return the empty value for a return annotation.

    Unannotated members, optional types and anything without an obvious
    empty value produce None.
    """
    if annotation is UNANNOTATED or annotation is None or isinstance(annotation, str):
        return None
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        return None
    factory = _EMPTY_BY_TYPE.get(origin or annotation)
    if factory is None:
        return None
    return factory()


def default_for(
    annotation: Any,
    policy: DefaultValue,
    nested_factory: Callable[[type], Any] | None = None,
) -> Any:
    """
    Compute the loose-mode fallback for a member's return annotation.

    Args:
        annotation: Declared return type of the member.
        policy: Fallback policy of the owning mock.
        nested_factory: Builds a nested fake for interface return types;
            only consulted under ``DefaultValue.MOCK``.
    """
    if policy is DefaultValue.MOCK and nested_factory is not None and is_interface(annotation):
        return nested_factory(annotation)
    return empty_value(annotation)
