"""
Sample system under test for the mocking tutorials.

Two trivial loggers forward their work to injected collaborators. They exist
only to be tested with fakes of the collaborator interfaces.
"""

from samples.interfaces import ILoggerDependency, ILogMailer, ILogWriter
from samples.logger import Logger
from samples.smart_logger import SmartLogger

__all__ = ["ILogMailer", "ILogWriter", "ILoggerDependency", "Logger", "SmartLogger"]
