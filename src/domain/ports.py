"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """
    Port interface for the shared key-value store.

    Every record of the verification protocol lives behind this interface.
    Entries written with a TTL behave exactly like missing keys once the
    TTL has elapsed. Each method is a single-key operation and relies on
    the store's own per-key atomicity.
    """

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Unconditionally set a string value with a TTL."""
        ...

    def get(self, key: str) -> str | None:
        """Read a string value, or None if absent or expired."""
        ...

    def get_and_delete(self, key: str) -> str | None:
        """
        Atomically read and remove a string value.

        Two concurrent calls for the same key can never both observe the
        value: exactly one returns it, the others return None.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        ...

    def hash_create(self, key: str, fields: dict[str, str], ttl_seconds: int) -> None:
        """Write a hash and set its TTL once."""
        ...

    def hash_get_all(self, key: str) -> dict[str, str]:
        """Read every field of a hash; empty dict if absent or expired."""
        ...

    def hash_set_if_exists(self, key: str, field: str, value: str) -> bool:
        """
        Set one field of an existing hash without touching its TTL.

        Returns:
            True if the hash existed, False if it was absent or expired
            (in which case nothing is written).
        """
        ...

    def ping(self) -> bool:
        """Check store connectivity."""
        ...


class UserDirectory(Protocol):
    """Port interface for looking up already-registered accounts."""

    def email_exists(self, email: str) -> bool:
        """
        Check whether an account already uses this email.

        Args:
            email: Normalized email address

        Returns:
            True if an account exists for the email
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send(self, to: str, subject: str, body: str) -> bool:
        """
        Deliver a plain-text message.

        Args:
            to: Recipient email address
            subject: Message subject line
            body: Plain-text message body

        Returns:
            True if the transport accepted the message, False otherwise
        """
        ...
