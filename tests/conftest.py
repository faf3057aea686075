"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory key-value store driven by a controllable clock
- A token codec with a fixed test secret
- Mocked user directory and email sender
- A fully wired EmailVerificationService
"""

import re
from datetime import timedelta
from unittest.mock import Mock

import pytest

from src.adapters.store.memory import InMemoryKeyValueStore
from src.domain.tokens import SignedTokenCodec
from src.domain.verification import EmailVerificationService

TEST_SECRET = "test-signing-secret-with-at-least-32-bytes"
TEST_DOMAIN = "konkuk.ac.kr"
TEST_BASE_URL = "https://api.gangku.test/v1"
TOKEN_TTL = timedelta(minutes=10)
SESSION_TTL = timedelta(minutes=30)

_TOKEN_PATTERN = re.compile(r"/verification/start\?token=(\S+)")


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def extract_token(body: str) -> str:
    """Pull the verification token out of a mail body."""
    match = _TOKEN_PATTERN.search(body)
    assert match is not None, f"No verification link in mail body: {body!r}"
    return match.group(1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def remaining_ttl(store: InMemoryKeyValueStore, clock: FakeClock):
    """Callable returning a live key's remaining lifetime in seconds, or None."""

    def _remaining(key: str) -> float | None:
        entry = store._entries.get(key)
        if entry is None or clock() >= entry[1]:
            return None
        return entry[1] - clock()

    return _remaining


@pytest.fixture
def codec() -> SignedTokenCodec:
    return SignedTokenCodec(secret=TEST_SECRET)


@pytest.fixture
def user_directory() -> Mock:
    directory = Mock()
    directory.email_exists.return_value = False
    return directory


@pytest.fixture
def email_sender() -> Mock:
    sender = Mock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def service(
    codec: SignedTokenCodec,
    store: InMemoryKeyValueStore,
    user_directory: Mock,
    email_sender: Mock,
) -> EmailVerificationService:
    return EmailVerificationService(
        codec=codec,
        store=store,
        user_directory=user_directory,
        email_sender=email_sender,
        token_ttl=TOKEN_TTL,
        session_ttl=SESSION_TTL,
        allowed_domain=TEST_DOMAIN,
        base_url=TEST_BASE_URL,
    )


@pytest.fixture
def last_mailed_token(email_sender: Mock):
    """Callable returning the token from the most recent mail sent."""

    def _last_token() -> str:
        body = email_sender.send.call_args[0][2]
        return extract_token(body)

    return _last_token
