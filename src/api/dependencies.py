"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Request

from src.adapters.repository.postgres import PostgresUserDirectory
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.smtp import SmtpEmailSender
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailSender, KeyValueStore, UserDirectory
from src.domain.tokens import SignedTokenCodec
from src.domain.verification import EmailVerificationService


def get_store(request: Request) -> KeyValueStore:
    """
    Get key-value store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.store


def get_user_directory(request: Request) -> UserDirectory:
    """Create user directory with connection pool from app state."""
    return PostgresUserDirectory(request.app.state.pool)


def get_email_sender(settings: Settings = Depends(get_settings)) -> EmailSender:
    """Select the mail transport configured by MAIL_BACKEND."""
    if settings.mail_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
        )
    return ConsoleEmailSender()


def get_token_codec(settings: Settings = Depends(get_settings)) -> SignedTokenCodec:
    return SignedTokenCodec(secret=settings.jwt_secret, algorithm=settings.jwt_algorithm)


def get_verification_service(
    settings: Settings = Depends(get_settings),
    store: KeyValueStore = Depends(get_store),
    user_directory: UserDirectory = Depends(get_user_directory),
    email_sender: EmailSender = Depends(get_email_sender),
    codec: SignedTokenCodec = Depends(get_token_codec),
) -> EmailVerificationService:
    """
    Create verification service with injected dependencies.

    Wires together the store, user directory, mail sender and token codec.
    """
    return EmailVerificationService(
        codec=codec,
        store=store,
        user_directory=user_directory,
        email_sender=email_sender,
        token_ttl=timedelta(minutes=settings.token_ttl_minutes),
        session_ttl=timedelta(minutes=settings.session_ttl_minutes),
        allowed_domain=settings.allowed_email_domain,
        base_url=settings.base_url,
    )
