"""
Collaborator interfaces used by the sample loggers.

Declared as ``typing.Protocol`` classes: the loggers only depend on the
shape of these objects, so a real implementation, a hand-written fake and an
engine-generated proxy are interchangeable.
"""

from __future__ import annotations

from email.message import EmailMessage
from typing import Protocol, runtime_checkable


@runtime_checkable
class ILogWriter(Protocol):
    """Destination that log lines are written to."""

    def get_logger(self) -> str: ...

    def set_logger(self, logger: str) -> None: ...

    def write(self, message: str) -> None: ...


@runtime_checkable
class ILogMailer(Protocol):
    """Sends log lines by email."""

    def get_default_user_name(self) -> str: ...

    def create_message(self, body: str) -> EmailMessage: ...

    def send(self, message: EmailMessage) -> None: ...


@runtime_checkable
class ILoggerDependency(Protocol):
    """Environment information a logger needs to locate its output."""

    def get_current_directory(self) -> str: ...

    def get_directory_by_logger_name(self, logger_name: str) -> str: ...

    @property
    def default_logger(self) -> str: ...
