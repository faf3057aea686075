"""
Domain exceptions - Semantic error types for email verification.

Token codec failures are raised by the codec and classified by the
verification service into typed outcomes. Infrastructure failures are
raised by adapters and propagate to the HTTP boundary, which answers
with a generic server error.
"""


class EmailVerificationError(Exception):
    """Base class for email verification errors."""

    pass


class TokenInvalid(EmailVerificationError):
    """Token is malformed, carries a bad signature, or has the wrong audience."""

    pass


class TokenExpired(EmailVerificationError):
    """Token signature is valid but its expiry has passed."""

    pass


class InfrastructureError(EmailVerificationError):
    """A collaborator (store, user directory, mail transport) failed."""

    pass


class StoreUnavailable(InfrastructureError):
    """Key-value store could not be reached or rejected the command."""

    pass


class UserDirectoryUnavailable(InfrastructureError):
    """Account lookup against the user database failed."""

    pass


class MailDeliveryFailed(InfrastructureError):
    """Mail transport reported that the verification message was not sent."""

    pass
