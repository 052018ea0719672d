"""Mail adapter for local development.

Nothing leaves the process: messages are written to the application log.
Bodies (which carry verification codes) only appear at debug level.
"""

from email.message import EmailMessage

from solsign.logging.logger import Log
from solsign.mail.base import BaseMailer


class LogMailer(BaseMailer):
    """Writes outgoing mail to the log instead of delivering it."""

    def send(self, message: EmailMessage) -> None:
        Log.info(f"Mail to {message['To']}: {message['Subject']}")
        body = message.get_body(preferencelist=("plain",))
        if body is not None:
            Log.debug(body.get_content())
