"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification messages for development.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - the verification link is visible in
    the application log.
    """

    def send(self, to: str, subject: str, body: str) -> bool:
        """
        Log the message instead of delivering it.

        The message is logged at INFO level to be visible in docker-compose logs.

        Args:
            to: Recipient email address (normalized by domain layer)
            subject: Message subject line
            body: Plain-text body containing the verification link

        Returns:
            Always True
        """
        logger.info("[VERIFICATION] To: %s Subject: %s\n%s", to, subject, body)
        return True
