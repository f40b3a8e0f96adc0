"""Logger that mails each line before writing it."""

from samples.interfaces import ILogMailer, ILogWriter


class SmartLogger:
    """
    Mails and writes every log line.

    Args:
        log_writer: Destination for every line.
        log_mailer: Builds and sends the notification email.
    """

    def __init__(self, log_writer: ILogWriter, log_mailer: ILogMailer):
        self._log_writer = log_writer
        self._log_mailer = log_mailer

    def write_line(self, message: str) -> None:
        """
        Mail ``message``, then write it.

        The mailer builds the message first; whatever it returns is handed
        back to ``send`` unchanged.
        """
        mail_message = self._log_mailer.create_message(message)
        self._log_mailer.send(mail_message)

        self._log_writer.write(message)
