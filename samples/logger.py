"""Plain logger that forwards every line to an ``ILogWriter``."""

from samples.interfaces import ILogWriter


class Logger:
    """
    Writes log lines through an injected writer.

    Args:
        log_writer: Destination for every line.
    """

    def __init__(self, log_writer: ILogWriter):
        self._log_writer = log_writer

    def write_line(self, message: str) -> None:
        self._log_writer.write(message)
