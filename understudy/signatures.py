"""
Interface introspection.

Builds the capability table of an interface: one ``MethodSignature`` per
public method, property or annotated data member. The table is what the
proxy dispatches on, so nothing outside it can be faked or set up.

Interfaces are ordinary Python classes, usually ``typing.Protocol`` or
``abc.ABC`` subclasses::

    class ILogWriter(Protocol):
        def write(self, message: str) -> None: ...
"""

from __future__ import annotations

import functools
import inspect
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

# Sentinel for members declared without a return annotation
UNANNOTATED: Any = inspect.Signature.empty


class MemberKind(str, Enum):
    """Kinds of interface member that can be faked."""

    METHOD = "method"
    PROPERTY = "property"


@dataclass(frozen=True)
class MethodSignature:
    """
    Identifies a fake-able member of an interface.

    Attributes:
        owner: Name of the interface declaring the member.
        name: Member name.
        kind: Method or property.
        parameter_names: Ordered parameter names, excluding ``self``.
        parameter_types: Ordered parameter annotations.
        return_type: Declared return annotation, or ``UNANNOTATED``.
    """

    owner: str
    name: str
    kind: MemberKind
    parameter_names: tuple[str, ...] = ()
    parameter_types: tuple[Any, ...] = ()
    return_type: Any = UNANNOTATED
    python_signature: inspect.Signature | None = field(
        default=None, compare=False, hash=False, repr=False
    )

    @property
    def returns_none(self) -> bool:
        """True if the member is explicitly declared to return None."""
        return self.return_type is None or self.return_type is type(None)

    def bind(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[Any, ...]:
        """
        Bind call arguments into the ordered argument tuple.

        Declared defaults are applied so that ``write("x")`` and
        ``write(message="x")`` produce the same tuple.

        Raises:
            TypeError: If the arguments do not fit the signature.
        """
        if self.kind is MemberKind.PROPERTY:
            if args or kwargs:
                raise TypeError(f"Property '{self.name}' takes no arguments")
            return ()
        if self.python_signature is None:
            if kwargs:
                raise TypeError(f"'{self.name}' got unexpected keyword arguments")
            return tuple(args)
        bound = self.python_signature.bind(*args, **kwargs)
        bound.apply_defaults()
        return tuple(bound.arguments[name] for name in self.parameter_names)

    def describe(self, arguments: str | None = None) -> str:
        """Render as ``Owner.name(args)`` or ``Owner.name`` for properties."""
        if self.kind is MemberKind.PROPERTY:
            return f"{self.owner}.{self.name}"
        return f"{self.owner}.{self.name}({arguments or ''})"

    def __str__(self) -> str:
        return self.describe(", ".join(self.parameter_names))


def _resolved_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to the raw annotations
        return dict(getattr(obj, "__annotations__", {}) or {})


def _method_signature(owner: str, name: str, func: Any) -> MethodSignature:
    full = inspect.signature(func)
    parameters = list(full.parameters.values())[1:]  # drop self
    hints = _resolved_hints(func)
    bindable = full.replace(parameters=parameters)
    return MethodSignature(
        owner=owner,
        name=name,
        kind=MemberKind.METHOD,
        parameter_names=tuple(p.name for p in parameters),
        parameter_types=tuple(hints.get(p.name, p.annotation) for p in parameters),
        return_type=hints.get("return", full.return_annotation),
        python_signature=bindable,
    )


def _property_signature(owner: str, name: str, prop: property) -> MethodSignature:
    return_type = UNANNOTATED
    if prop.fget is not None:
        return_type = _resolved_hints(prop.fget).get("return", UNANNOTATED)
    return MethodSignature(owner=owner, name=name, kind=MemberKind.PROPERTY, return_type=return_type)


@functools.lru_cache(maxsize=None)
def describe_interface(interface: type) -> Mapping[str, MethodSignature]:
    """
    Build the capability table for an interface.

    Public functions become method signatures; properties and annotation-only
    data members become property signatures. Static and class methods are
    not part of an instance's contract and are skipped.

    Args:
        interface: The class to fake.

    Returns:
        Read-only mapping of member name to signature.
    """
    if not inspect.isclass(interface):
        raise TypeError(f"Expected an interface class, got {interface!r}")

    table: dict[str, MethodSignature] = {}
    owner = interface.__name__

    for name in sorted(dir(interface)):
        if name.startswith("_"):
            continue
        member = inspect.getattr_static(interface, name)
        if isinstance(member, (staticmethod, classmethod)):
            continue
        if isinstance(member, property):
            table[name] = _property_signature(owner, name, member)
        elif inspect.isfunction(member):
            table[name] = _method_signature(owner, name, member)

    # Protocol data members declared as ``name: type`` have no class attribute
    for klass in reversed(interface.__mro__):
        if klass is object:
            continue
        for name, annotation in _resolved_hints(klass).items():
            if name.startswith("_") or name in table:
                continue
            if typing.get_origin(annotation) is typing.ClassVar:
                continue
            table[name] = MethodSignature(
                owner=owner, name=name, kind=MemberKind.PROPERTY, return_type=annotation
            )

    logger.debug(f"Described interface {owner} with {len(table)} members")
    return MappingProxyType(table)
