"""
Signed verification tokens.

Tokens are compact HMAC-signed JWTs that bind an email address to a
unique token id (jti) and an expiry. They are never stored; the token id
is what the redemption whitelist is keyed by.

Claims:
    sub: email address the link was mailed to
    jti: random UUID4, the whitelist key
    iat: issue time
    exp: expiry time
    aud: always "signup"

Verification is fail-closed: anything PyJWT rejects for a reason other
than expiry is reported as TokenInvalid.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from .exceptions import TokenExpired, TokenInvalid

SIGNUP_AUDIENCE = "signup"


@dataclass(frozen=True)
class IssuedToken:
    """Freshly minted token and the values the caller needs to track it."""

    token: str
    token_id: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Claims recovered from a verified token."""

    email: str
    token_id: str


class SignedTokenCodec:
    """
    Creates and verifies signup verification tokens.

    The signing secret and algorithm are the only key material; replacing
    them only requires constructing a new codec.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def create(self, email: str, ttl: timedelta) -> IssuedToken:
        """
        Mint a token for an email address.

        Args:
            email: Normalized email address (becomes the subject)
            ttl: Token lifetime; a negative value yields an expired token

        Returns:
            IssuedToken with the encoded token, its id and expiry
        """
        token_id = str(uuid.uuid4())
        now = datetime.now(UTC)
        expires_at = now + ttl
        payload = {
            "sub": email,
            "jti": token_id,
            "iat": now,
            "exp": expires_at,
            "aud": SIGNUP_AUDIENCE,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(token=token, token_id=token_id, expires_at=expires_at)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature, expiry and audience.

        Raises:
            TokenExpired: Signature valid but token is past its expiry
            TokenInvalid: Any other verification or parse failure
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=SIGNUP_AUDIENCE,
                options={"require": ["sub", "jti", "exp", "aud"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Verification token has expired") from e
        except jwt.PyJWTError as e:
            raise TokenInvalid("Verification token is invalid") from e

        email = payload.get("sub")
        token_id = payload.get("jti")
        if not isinstance(email, str) or not email:
            raise TokenInvalid("Verification token has no subject")
        if not isinstance(token_id, str) or not token_id:
            raise TokenInvalid("Verification token has no id")

        return TokenClaims(email=email, token_id=token_id)
