# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from itsdangerous import BadData, TimestampSigner, URLSafeTimedSerializer

from gatepage.errors import InvalidTokenError

COOKIE_NAME = "token"
DEFAULT_MAX_AGE_SECONDS = 3600  # 1 hour
DEFAULT_SALT = "gatepage.session.v1"

Clock = Callable[[], float]


class _ClockedSigner(TimestampSigner):
    """TimestampSigner reading the time from an injected clock."""

    def __init__(self, *args, clock: Clock = time.time, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._clock = clock

    def get_timestamp(self) -> int:
        return int(self._clock())


@dataclass(frozen=True)
class SessionClaim:
    email: str
    name: str
    issued_at: datetime
    expires_at: datetime


class SessionTokens:
    """Signs and verifies the ``{email, name}`` claim carried by the session cookie.

    The issuance time is part of the signed value; a token is accepted while
    its age in whole seconds is at most ``ttl_seconds``.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = DEFAULT_MAX_AGE_SECONDS,
        clock: Clock = time.time,
        salt: str = DEFAULT_SALT,
    ) -> None:
        if not secret:
            raise ValueError("Missing signing secret")
        self.ttl_seconds = int(ttl_seconds)
        self._serializer = URLSafeTimedSerializer(
            secret_key=secret,
            salt=salt,
            signer=_ClockedSigner,
            signer_kwargs={"clock": clock},
        )

    def sign(self, email: str, name: str) -> str:
        return self._serializer.dumps({"email": email, "name": name})

    def verify(self, token: str) -> SessionClaim:
        if not token:
            raise InvalidTokenError("Missing session token")
        try:
            data, issued_at = self._serializer.loads(token, max_age=self.ttl_seconds, return_timestamp=True)
        except BadData as e:
            raise InvalidTokenError(code="invalid_token") from e

        email = str((data or {}).get("email") or "").strip() if isinstance(data, dict) else ""
        if not email:
            raise InvalidTokenError("Session token carries no email")
        return SessionClaim(
            email=email,
            name=str(data.get("name") or ""),
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=self.ttl_seconds),
        )
