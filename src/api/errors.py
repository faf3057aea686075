"""
Error translation - domain failure kinds to HTTP responses.

Every VerificationError maps to a status code and a stable code string.
Infrastructure failures share one generic 500 body.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from src.api.models import ErrorDetail, ErrorResponse
from src.domain.results import VerificationError

INTERNAL_SERVER_ERROR_CODE = "INTERNAL_SERVER_ERROR"

# kind -> (status, code, message)
_ERROR_TABLE: dict[VerificationError, tuple[int, str, str]] = {
    VerificationError.INVALID_EMAIL_FORMAT: (
        status.HTTP_400_BAD_REQUEST,
        "INVALID_EMAIL_FORMAT",
        "Email address format is invalid.",
    ),
    VerificationError.EMAIL_CONFLICT: (
        status.HTTP_409_CONFLICT,
        "EMAIL_CONFLICT",
        "An account with this email already exists.",
    ),
    VerificationError.INVALID_TOKEN_FORMAT: (
        status.HTTP_400_BAD_REQUEST,
        "INVALID_TOKEN_FORMAT",
        "Verification token format is invalid.",
    ),
    VerificationError.TOKEN_EXPIRED_OR_USED: (
        status.HTTP_410_GONE,
        "TOKEN_EXPIRED",
        "Verification token has expired.",
    ),
    VerificationError.INVALID_SESSION: (
        status.HTTP_400_BAD_REQUEST,
        "INVALID_SESSION",
        "No valid signup session.",
    ),
    VerificationError.VERIFICATION_NOT_STARTED: (
        status.HTTP_400_BAD_REQUEST,
        "VERIFICATION_NOT_STARTED",
        "Email verification has not been completed.",
    ),
    VerificationError.EMAIL_MISMATCH: (
        status.HTTP_400_BAD_REQUEST,
        "EMAIL_MISMATCH",
        "Session email does not match the verified email.",
    ),
}


def error_response(kind: VerificationError) -> JSONResponse:
    """Build the {"error": {code, message}} response for a failure kind."""
    status_code, code, message = _ERROR_TABLE[kind]
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def internal_error_response(message: str) -> JSONResponse:
    """Generic server error; infrastructure detail is never exposed."""
    body = ErrorResponse(error=ErrorDetail(code=INTERNAL_SERVER_ERROR_CODE, message=message))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )
