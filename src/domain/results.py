"""
Typed outcomes of the verification protocol.

Each entry point of EmailVerificationService returns either its success
payload or a Failure carrying one of the VerificationError kinds. All
kinds are terminal: the caller must restart the signup flow.
"""

from dataclasses import dataclass
from enum import Enum


class VerificationError(str, Enum):
    """
    Terminal failure kinds, valued by their stable machine-readable code.

    TOKEN_EXPIRED_OR_USED deliberately covers both natural expiry and a
    prior redemption so that redemption timing is not observable.
    EMAIL_MISMATCH is reserved; no current code path produces it.
    """

    INVALID_EMAIL_FORMAT = "INVALID_EMAIL_FORMAT"
    EMAIL_CONFLICT = "EMAIL_CONFLICT"
    INVALID_TOKEN_FORMAT = "INVALID_TOKEN_FORMAT"
    TOKEN_EXPIRED_OR_USED = "TOKEN_EXPIRED_OR_USED"
    INVALID_SESSION = "INVALID_SESSION"
    VERIFICATION_NOT_STARTED = "VERIFICATION_NOT_STARTED"
    EMAIL_MISMATCH = "EMAIL_MISMATCH"


@dataclass(frozen=True)
class Failure:
    error: VerificationError


@dataclass(frozen=True)
class SendSuccess:
    session_id: str
    session_ttl_seconds: int
    email: str


@dataclass(frozen=True)
class ConsumeSuccess:
    email: str


@dataclass(frozen=True)
class ConfirmSuccess:
    email: str
    verified: bool = True
    # True when the session had already been confirmed by an earlier call
    already_verified: bool = False


SendOutcome = SendSuccess | Failure
ConsumeOutcome = ConsumeSuccess | Failure
ConfirmOutcome = ConfirmSuccess | Failure
