"""
API v1 routes.

Defines REST endpoints for the signup email verification API:
- POST /v1/verification          - Send verification link, set session cookie
- GET  /v1/verification/start    - Redeem the mailed link (visited by a browser)
- POST /v1/verification/confirm  - Confirm the session's email is verified

Handlers are plain functions: the store, directory and mail adapters
block, so FastAPI runs each request in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status

from src.api.dependencies import get_verification_service
from src.api.errors import error_response, internal_error_response
from src.api.models import (
    ConfirmVerificationResponse,
    ErrorResponse,
    SendVerificationRequest,
    SendVerificationResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.exceptions import InfrastructureError
from src.domain.results import Failure
from src.domain.verification import EmailVerificationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])


@router.post(
    "/verification",
    response_model=SendVerificationResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid email format or domain"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Send a verification email",
    description="Mail a single-use verification link to an institutional address "
    "and start a signup session held in an HTTP-only cookie.",
)
def send_verification(
    request_data: SendVerificationRequest,
    response: Response,
    service: EmailVerificationService = Depends(get_verification_service),
    settings: Settings = Depends(get_settings),
):
    """
    Send a verification link.

    - **email**: Institutional email address

    The signup session id is returned only as a cookie.
    """
    try:
        outcome = service.send(request_data.email)
    except InfrastructureError:
        logger.exception("Failed to send verification email")
        return internal_error_response(
            "The verification email could not be sent. Please try again later."
        )

    if isinstance(outcome, Failure):
        return error_response(outcome.error)

    response.set_cookie(
        key=settings.signup_cookie_name,
        value=outcome.session_id,
        max_age=outcome.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.signup_cookie_secure,
        samesite=settings.signup_cookie_samesite,
    )
    return SendVerificationResponse(message="Verification email sent successfully.")


@router.get(
    "/verification/start",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed or tampered token"},
        410: {"model": ErrorResponse, "description": "Token expired or already used"},
    },
    summary="Redeem a verification link",
    description="Opened by the user's browser from the mailed link. "
    "Each token can be redeemed at most once.",
)
def start_verification(
    token: str = Query(..., description="Signed verification token from the email"),
    service: EmailVerificationService = Depends(get_verification_service),
):
    """Redeem the token embedded in the mailed link."""
    try:
        outcome = service.consume(token)
    except InfrastructureError:
        logger.exception("Failed to redeem verification token")
        return internal_error_response("Email verification failed. Please try again later.")

    if isinstance(outcome, Failure):
        return error_response(outcome.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/verification/confirm",
    response_model=ConfirmVerificationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid session or link not yet clicked"},
    },
    summary="Confirm email verification",
    description="Check the signup session cookie against the redeemed link "
    "and mark the session as verified.",
)
def confirm_verification(
    request: Request,
    service: EmailVerificationService = Depends(get_verification_service),
    settings: Settings = Depends(get_settings),
):
    """Confirm the signup session identified by the session cookie."""
    session_id = request.cookies.get(settings.signup_cookie_name)

    try:
        outcome = service.confirm(session_id)
    except InfrastructureError:
        logger.exception("Failed to confirm signup session")
        return internal_error_response(
            "An error occurred while confirming email verification."
        )

    if isinstance(outcome, Failure):
        return error_response(outcome.error)

    return ConfirmVerificationResponse(verified=outcome.verified, email=outcome.email)
