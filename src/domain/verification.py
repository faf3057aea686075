"""
Email verification domain service - three-phase signup verification protocol.

This module proves that a prospective user controls an institutional
email address before registration is allowed to proceed.

Protocol (per signup attempt)
=============================

    send(email)         -> session CREATED (verified=0), link mailed
    consume(token)      -> whitelist entry popped, verified-email flag SET
    confirm(session_id) -> session VERIFIED (verified=1), flag cleared

Terminal failure states:
- EXPIRED: any TTL elapsed before the next transition (missing record)
- CONFLICT: the email already belongs to an account at send time

Records (see stores.py) are independent keys in a shared store. No step
writes two records atomically; a crash between writes only leaves keys
that expire on their own TTL. The one cross-request atomic operation is
the whitelist get-and-delete, which makes every token single-use even
when a mail client prefetches the link while the user clicks it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from email_validator import EmailNotValidError, validate_email

from .exceptions import MailDeliveryFailed, TokenExpired, TokenInvalid
from .ports import EmailSender, KeyValueStore, UserDirectory
from .results import (
    ConfirmOutcome,
    ConfirmSuccess,
    ConsumeOutcome,
    ConsumeSuccess,
    Failure,
    SendOutcome,
    SendSuccess,
    VerificationError,
)
from .stores import RedemptionWhitelist, SignupSessionStore, VerifiedEmailFlag
from .tokens import SignedTokenCodec

logger = logging.getLogger(__name__)

VERIFICATION_PATH = "/verification/start?token="
VERIFICATION_SUBJECT = "[GangKU] Please verify your email address"
VERIFICATION_BODY_TEMPLATE = """Hello, this is GangKU.
Click the link below to complete your email verification.

{url}

(This link is valid for {minutes} minutes.)
"""


@dataclass
class EmailVerificationService:
    """
    Domain service for signup email verification.

    Composes the token codec and the three store records into the
    send / consume / confirm protocol. Every entry point returns a typed
    outcome; only infrastructure failures are raised.
    """

    codec: SignedTokenCodec
    store: KeyValueStore
    user_directory: UserDirectory
    email_sender: EmailSender
    token_ttl: timedelta
    session_ttl: timedelta
    allowed_domain: str
    base_url: str

    whitelist: RedemptionWhitelist = field(init=False)
    verified_flag: VerifiedEmailFlag = field(init=False)
    sessions: SignupSessionStore = field(init=False)

    def __post_init__(self) -> None:
        self.whitelist = RedemptionWhitelist(self.store)
        self.verified_flag = VerifiedEmailFlag(self.store)
        self.sessions = SignupSessionStore(self.store)

    @property
    def session_ttl_seconds(self) -> int:
        return int(self.session_ttl.total_seconds())

    def send(self, email: str) -> SendOutcome:
        """
        Start a signup attempt and mail the verification link.

        Args:
            email: Address entered by the user (will be normalized)

        Returns:
            SendSuccess with the new session id, or Failure with
            INVALID_EMAIL_FORMAT / EMAIL_CONFLICT

        Raises:
            InfrastructureError: Store, user directory or mail failure
        """
        normalized_email = self._validate_email(email)
        if normalized_email is None:
            return Failure(VerificationError.INVALID_EMAIL_FORMAT)

        # UX fast-path only; registration enforces uniqueness itself
        if self.user_directory.email_exists(normalized_email):
            return Failure(VerificationError.EMAIL_CONFLICT)

        issued = self.codec.create(normalized_email, self.token_ttl)

        # Whitelist entry dies together with the token
        remaining = issued.expires_at - datetime.now(UTC)
        whitelist_ttl = max(1, int(remaining.total_seconds()))
        self.whitelist.put(issued.token_id, normalized_email, whitelist_ttl)

        session_id = str(uuid.uuid4())
        self.sessions.create(session_id, normalized_email, self.session_ttl_seconds)

        self._send_verification_mail(normalized_email, issued.token)
        logger.info("Verification link issued for %s", normalized_email)

        return SendSuccess(
            session_id=session_id,
            session_ttl_seconds=self.session_ttl_seconds,
            email=normalized_email,
        )

    def consume(self, token: str) -> ConsumeOutcome:
        """
        Redeem a mailed link.

        Returns:
            ConsumeSuccess, or Failure with INVALID_TOKEN_FORMAT /
            TOKEN_EXPIRED_OR_USED
        """
        try:
            claims = self.codec.verify(token)
        except TokenExpired:
            return Failure(VerificationError.TOKEN_EXPIRED_OR_USED)
        except TokenInvalid:
            logger.warning("Rejected malformed verification token")
            return Failure(VerificationError.INVALID_TOKEN_FORMAT)

        email = self.whitelist.consume(claims.token_id)
        if email is None:
            # Redeemed and expired tokens share one error kind
            logger.warning("Verification token %s already used or expired", claims.token_id)
            return Failure(VerificationError.TOKEN_EXPIRED_OR_USED)

        # Flag only matters while a signup session could still be open
        self.verified_flag.set(email, self.session_ttl_seconds)
        logger.info("Verification link redeemed for %s", email)
        return ConsumeSuccess(email=email)

    def confirm(self, session_id: str | None) -> ConfirmOutcome:
        """
        Confirm that the session's email has been verified.

        Calling confirm again on an already-verified session succeeds with
        already_verified=True and leaves the flag untouched.

        Returns:
            ConfirmSuccess, or Failure with INVALID_SESSION /
            VERIFICATION_NOT_STARTED
        """
        if session_id is None or not session_id.strip():
            return Failure(VerificationError.INVALID_SESSION)

        session = self.sessions.get(session_id)
        if session is None:
            return Failure(VerificationError.INVALID_SESSION)

        if session.verified:
            return ConfirmSuccess(email=session.email, already_verified=True)

        if not self.verified_flag.peek(session.email):
            return Failure(VerificationError.VERIFICATION_NOT_STARTED)

        # Session first: a crash after this line leaves a verified session
        # and a flag that expires on its own
        if not self.sessions.mark_verified(session_id):
            return Failure(VerificationError.INVALID_SESSION)
        self.verified_flag.clear(session.email)

        logger.info("Signup session verified for %s", session.email)
        return ConfirmSuccess(email=session.email)

    def _validate_email(self, email: str | None) -> str | None:
        """
        Normalize and validate an email address.

        Applies strip + lowercase, checks syntax (no DNS lookup) and
        requires the institutional domain. Returns None when invalid.
        """
        if not isinstance(email, str):
            return None
        normalized_email = email.strip().lower()
        try:
            validated = validate_email(normalized_email, check_deliverability=False)
        except EmailNotValidError:
            return None
        if validated.domain.lower() != self.allowed_domain.lower():
            return None
        return normalized_email

    def _send_verification_mail(self, email: str, token: str) -> None:
        url = f"{self.base_url.rstrip('/')}{VERIFICATION_PATH}{token}"
        body = VERIFICATION_BODY_TEMPLATE.format(
            url=url,
            minutes=int(self.token_ttl.total_seconds() // 60),
        )
        if not self.email_sender.send(email, VERIFICATION_SUBJECT, body):
            raise MailDeliveryFailed(f"Verification mail to {email} was not delivered")
