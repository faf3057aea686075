"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, Field


class SendVerificationRequest(BaseModel):
    """Request model for sending a verification email."""

    # Syntax and domain are checked by the domain service so that a bad
    # address gets the INVALID_EMAIL_FORMAT error body rather than a 422
    email: str = Field(
        ...,
        max_length=254,
        description="Institutional email address to verify",
    )


class SendVerificationResponse(BaseModel):
    """Response model for an accepted verification request."""

    message: str


class ConfirmVerificationResponse(BaseModel):
    """Response model for a confirmed signup session."""

    verified: bool
    email: str


class ErrorDetail(BaseModel):
    """Machine-readable error code with a human-readable message."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: ErrorDetail
