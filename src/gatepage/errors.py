# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy for the auth flow.

Every error carries a stable ``code`` (for logs and tests) and a ``message``
that is safe to show in a form. None of them is meant to reach the transport
layer: routes turn them into re-rendered forms or redirects.
"""

from __future__ import annotations


class AuthError(Exception):
    code = "auth_error"
    message = "Something went wrong."

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(AuthError):
    code = "validation_error"


class CredentialMismatchError(AuthError):
    code = "credential_mismatch"


class InvalidTokenError(AuthError):
    code = "invalid_token"
    message = "Session is missing or expired"


class UnexpectedStoreError(AuthError):
    code = "store_error"
    message = "Something went wrong. Try again."
