"""
Shared fixtures for adversarial tests.

Provides a started signup attempt (mailed token plus session id) on top
of the in-memory service wired in the root conftest.
"""

from collections.abc import Callable
from typing import NamedTuple

import pytest

from src.domain.results import SendSuccess
from src.domain.verification import EmailVerificationService

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial

VICTIM_EMAIL = "victim@konkuk.ac.kr"


class StartedSignup(NamedTuple):
    email: str
    token: str
    session_id: str


@pytest.fixture
def start_signup(
    service: EmailVerificationService, last_mailed_token: Callable[[], str]
) -> Callable[[str], StartedSignup]:
    """Callable that sends a verification mail and returns its token and session."""

    def _start(email: str = VICTIM_EMAIL) -> StartedSignup:
        outcome = service.send(email)
        assert isinstance(outcome, SendSuccess)
        return StartedSignup(outcome.email, last_mailed_token(), outcome.session_id)

    return _start
