"""
Verification records kept in the shared key-value store.

Three independent records make up the protocol state:

- RedemptionWhitelist:  auth:signup:jti:{token_id}            -> email
- VerifiedEmailFlag:    auth:signup:verified-email:{email}    -> "1"
- SignupSessionStore:   auth:signup:session:{session_id}      -> {email, verified}

No two records are ever written together. Each operation is a single
store call, so correctness rests on per-key atomicity plus the atomic
get-and-delete used by RedemptionWhitelist.consume().
"""

from dataclasses import dataclass

from .ports import KeyValueStore

WHITELIST_PREFIX = "auth:signup:jti:"
VERIFIED_EMAIL_PREFIX = "auth:signup:verified-email:"
SESSION_PREFIX = "auth:signup:session:"

VERIFIED_FLAG_VALUE = "1"
SESSION_UNVERIFIED = "0"
SESSION_VERIFIED = "1"


@dataclass
class RedemptionWhitelist:
    """Not-yet-redeemed token ids, each mapped to the email it was minted for."""

    store: KeyValueStore

    def put(self, token_id: str, email: str, ttl_seconds: int) -> None:
        self.store.set(self._key(token_id), email, ttl_seconds)

    def consume(self, token_id: str) -> str | None:
        """
        Redeem a token id.

        Returns the bound email for exactly one caller per token id; every
        other caller (and any caller after expiry) gets None.
        """
        return self.store.get_and_delete(self._key(token_id))

    @staticmethod
    def _key(token_id: str) -> str:
        return f"{WHITELIST_PREFIX}{token_id}"


@dataclass
class VerifiedEmailFlag:
    """Marker that a link for this email was clicked and not yet confirmed."""

    store: KeyValueStore

    def set(self, email: str, ttl_seconds: int) -> None:
        self.store.set(self._key(email), VERIFIED_FLAG_VALUE, ttl_seconds)

    def peek(self, email: str) -> bool:
        # Any stored value counts; only presence matters
        return self.store.get(self._key(email)) is not None

    def clear(self, email: str) -> None:
        self.store.delete(self._key(email))

    @staticmethod
    def _key(email: str) -> str:
        return f"{VERIFIED_EMAIL_PREFIX}{email}"


@dataclass(frozen=True)
class SignupSessionRecord:
    """Snapshot of a signup session hash."""

    email: str
    verified: bool


@dataclass
class SignupSessionStore:
    """
    Signup sessions correlating a send() with a later confirm().

    The TTL is set once at creation and never refreshed. Sessions are
    never deleted explicitly; they age out.
    """

    store: KeyValueStore

    def create(self, session_id: str, email: str, ttl_seconds: int) -> None:
        self.store.hash_create(
            self._key(session_id),
            {"email": email, "verified": SESSION_UNVERIFIED},
            ttl_seconds,
        )

    def get(self, session_id: str) -> SignupSessionRecord | None:
        fields = self.store.hash_get_all(self._key(session_id))
        email = fields.get("email")
        if not email:
            return None
        return SignupSessionRecord(
            email=email,
            verified=fields.get("verified") == SESSION_VERIFIED,
        )

    def get_email(self, session_id: str) -> str | None:
        record = self.get(session_id)
        return record.email if record else None

    def mark_verified(self, session_id: str) -> bool:
        """
        Flip the session's verified bit to "1".

        Idempotent. An expired session is not recreated.

        Returns:
            True if the session still existed
        """
        return self.store.hash_set_if_exists(
            self._key(session_id), "verified", SESSION_VERIFIED
        )

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_PREFIX}{session_id}"
