"""
Domain layer - Pure business logic for signup email verification.

This package contains the token codec, the three verification records
and the send / consume / confirm protocol. It defines its own port
interfaces for infrastructure abstraction; adapters live elsewhere.
"""

from .exceptions import (
    EmailVerificationError,
    InfrastructureError,
    MailDeliveryFailed,
    StoreUnavailable,
    TokenExpired,
    TokenInvalid,
    UserDirectoryUnavailable,
)
from .ports import EmailSender, KeyValueStore, UserDirectory
from .results import (
    ConfirmSuccess,
    ConsumeSuccess,
    Failure,
    SendSuccess,
    VerificationError,
)
from .tokens import IssuedToken, SignedTokenCodec, TokenClaims
from .verification import EmailVerificationService

__all__ = [
    "ConfirmSuccess",
    "ConsumeSuccess",
    "EmailSender",
    "EmailVerificationError",
    "EmailVerificationService",
    "Failure",
    "InfrastructureError",
    "IssuedToken",
    "KeyValueStore",
    "MailDeliveryFailed",
    "SendSuccess",
    "SignedTokenCodec",
    "StoreUnavailable",
    "TokenClaims",
    "TokenExpired",
    "TokenInvalid",
    "UserDirectory",
    "UserDirectoryUnavailable",
    "VerificationError",
]
