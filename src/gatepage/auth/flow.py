# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Registration, login and session verification.

Each operation returns ``Ok(value)`` or ``Err(error)``; nothing raises to the
caller. Turning a result into HTML or a redirect is the web layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from argon2 import PasswordHasher

from gatepage.auth.passwords import hash_password, verify_password
from gatepage.auth.session import SessionClaim, SessionTokens
from gatepage.auth.users import User, UserStore
from gatepage.errors import (
    AuthError,
    CredentialMismatchError,
    InvalidTokenError,
    UnexpectedStoreError,
    ValidationError,
)
from gatepage.log import logger

T = TypeVar("T")

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: AuthError


Result = Union[Ok[T], Err]


@dataclass(frozen=True)
class IssuedSession:
    token: str
    claim: SessionClaim


def validate_registration(email: str, password: str) -> Optional[ValidationError]:
    """Form checks that need no store access, in the order they are reported."""
    if "@" not in email or "." not in email:
        return ValidationError("Email doesn't look right", code="malformed_email")
    if len(password) < MIN_PASSWORD_LENGTH:
        return ValidationError(
            f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
            code="password_too_short",
        )
    return None


class AuthFlow:
    def __init__(self, store: UserStore, tokens: SessionTokens, hasher: Optional[PasswordHasher] = None) -> None:
        self.store = store
        self.tokens = tokens
        self.hasher = hasher

    def register(self, name: str, email: str, password: str) -> Result[User]:
        invalid = validate_registration(email, password)
        if invalid is not None:
            logger.info(f"Registration rejected: {invalid.code}")
            return Err(invalid)

        # Check-then-insert is not atomic: concurrent sign-ups for one email can both pass.
        try:
            if self.store.find_by_email(email) is not None:
                logger.info("Registration rejected: email_taken")
                return Err(ValidationError("This email is already registered", code="email_taken"))

            user = User(name=name, email=email, password_hash=hash_password(password, self.hasher))
            self.store.insert(user)
        except Exception:
            logger.exception("Registration failed")
            return Err(UnexpectedStoreError("Something went wrong. Try again.", code="register_failed"))

        logger.info("New user registered")
        return Ok(user)

    def login(self, email: str, password: str) -> Result[IssuedSession]:
        try:
            user = self.store.find_by_email(email)
            if user is None:
                return Err(CredentialMismatchError("User not found", code="user_not_found"))
            if not verify_password(user.password_hash, password, self.hasher):
                return Err(CredentialMismatchError("Wrong password", code="wrong_password"))
            token = self.tokens.sign(user.email, user.name)
            claim = self.tokens.verify(token)
        except Exception:
            logger.exception("Login failed")
            return Err(UnexpectedStoreError("Login failed", code="login_failed"))

        logger.info("Session issued")
        return Ok(IssuedSession(token=token, claim=claim))

    def verify(self, token: str) -> Result[SessionClaim]:
        try:
            return Ok(self.tokens.verify(token))
        except InvalidTokenError as e:
            return Err(e)
