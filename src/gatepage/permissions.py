# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Union

from fastapi import HTTPException, Request
from fastapi.responses import RedirectResponse

from gatepage.auth.flow import AuthFlow, Ok
from gatepage.auth.session import COOKIE_NAME, SessionClaim
from gatepage.config import Settings

LOGIN_URL = "/login"


def check_session(request: Request, flow: AuthFlow) -> Union[SessionClaim, RedirectResponse]:
    """Guard for gated routes: the decoded claim, or a redirect to the login page.

    Only the cookie is consulted, never the credential store.
    """
    result = flow.verify(request.cookies.get(COOKIE_NAME, ""))
    if isinstance(result, Ok):
        request.state.claim = result.value
        return result.value
    return RedirectResponse(url=LOGIN_URL, status_code=303)


def require_session(request: Request) -> SessionClaim:
    outcome = check_session(request, request.app.state.flow)
    if isinstance(outcome, SessionClaim):
        return outcome
    raise HTTPException(status_code=303, headers={"Location": outcome.headers["location"]})


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": settings.cookie_secure,
        "max_age": settings.session_ttl_seconds,
    }
