"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers plain-text verification messages through an SMTP relay using
smtplib. Transport errors are logged and reported as False; the domain
turns that into MailDeliveryFailed.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Opens one connection per message; signup mail volume is low.
    """

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        starttls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._starttls = starttls
        self._timeout = timeout

    def send(self, to: str, subject: str, body: str) -> bool:
        """
        Send a plain-text message.

        Args:
            to: Recipient email address
            subject: Message subject line
            body: Plain-text message body

        Returns:
            True if the relay accepted the message, False on any
            SMTP or socket error
        """
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = to
        msg["Message-ID"] = make_msgid()
        msg.set_content(body)

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                if self._starttls:
                    server.starttls(context=ssl.create_default_context())
                if self._username or self._password:
                    server.login(self._username, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("SMTP send to %s failed", to)
            return False

        return True
