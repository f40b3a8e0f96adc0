"""
Unit tests for interface introspection.

Key SDET Concepts Demonstrated:
- Testing against small purpose-built interfaces
- Protocols and abstract base classes as contracts
"""

from __future__ import annotations

import abc
from typing import ClassVar, Protocol

import pytest

from samples import ILoggerDependency, ILogWriter
from understudy import MemberKind, describe_interface

pytestmark = pytest.mark.unit


class Greeter(abc.ABC):
    @abc.abstractmethod
    def greet(self, name: str, punctuation: str = "!") -> str:
        ...

    @staticmethod
    def helper() -> None:
        ...

    def _private(self) -> None:
        ...


class Settings(Protocol):
    timeout: int
    retries: ClassVar[int]

    def reload(self, *paths: str, **options: bool) -> None: ...


def test_log_writer_capability_table():
    """Test that every public method of ILogWriter becomes a method signature."""
    # Act
    table = describe_interface(ILogWriter)

    # Assert
    assert set(table) == {"get_logger", "set_logger", "write"}
    write = table["write"]
    assert write.kind is MemberKind.METHOD
    assert write.parameter_names == ("message",)
    assert write.parameter_types == (str,)
    assert write.returns_none


def test_properties_become_property_signatures():
    """Test that a declared property is faked as a property, not a method."""
    table = describe_interface(ILoggerDependency)

    assert table["default_logger"].kind is MemberKind.PROPERTY
    assert table["default_logger"].return_type is str
    assert table["get_directory_by_logger_name"].return_type is str


def test_static_and_private_members_are_skipped():
    """Test that only the instance contract of an ABC is described."""
    table = describe_interface(Greeter)

    assert set(table) == {"greet"}


def test_protocol_data_members_are_properties_but_classvars_are_not():
    table = describe_interface(Settings)

    assert table["timeout"].kind is MemberKind.PROPERTY
    assert table["timeout"].return_type is int
    assert "retries" not in table


def test_capability_table_is_read_only():
    """Test that callers cannot alter the cached table."""
    table = describe_interface(ILogWriter)

    with pytest.raises(TypeError):
        table["extra"] = table["write"]  # type: ignore[index]


def test_bind_applies_defaults_and_keywords():
    """Test that positional and keyword spellings bind to the same tuple."""
    greet = describe_interface(Greeter)["greet"]

    assert greet.bind(("Ada",), {}) == ("Ada", "!")
    assert greet.bind((), {"name": "Ada", "punctuation": "?"}) == ("Ada", "?")


def test_bind_keeps_variadic_arguments_together():
    reload = describe_interface(Settings)["reload"]

    assert reload.bind(("a", "b"), {"force": True}) == (("a", "b"), {"force": True})


def test_bind_rejects_arguments_that_do_not_fit():
    """Test that a call with a missing argument raises TypeError like a real method."""
    write = describe_interface(ILogWriter)["write"]

    with pytest.raises(TypeError):
        write.bind((), {})


def test_property_binding_takes_no_arguments():
    default_logger = describe_interface(ILoggerDependency)["default_logger"]

    assert default_logger.bind((), {}) == ()
    with pytest.raises(TypeError):
        default_logger.bind(("x",), {})


def test_describe_rejects_non_classes():
    with pytest.raises(TypeError):
        describe_interface("ILogWriter")  # type: ignore[arg-type]


def test_signature_rendering():
    write = describe_interface(ILogWriter)["write"]

    assert str(write) == "ILogWriter.write(message)"
    assert write.describe("'Hello'") == "ILogWriter.write('Hello')"
