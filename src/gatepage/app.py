# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from gatepage.auth.flow import AuthFlow, Err
from gatepage.auth.passwords import build_hasher
from gatepage.auth.session import COOKIE_NAME, Clock, SessionClaim, SessionTokens
from gatepage.auth.users import UserStore, open_store
from gatepage.config import Settings
from gatepage.log import bind_request_logging, logger
from gatepage.permissions import cookie_settings, require_session

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _render(request: Request, template_name: str, ctx: Optional[dict] = None):
    base_ctx = {"claim": getattr(request.state, "claim", None), "error": None}
    return templates.TemplateResponse(request, template_name, {**base_ctx, **(ctx or {})})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[UserStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Build the app around explicit settings and collaborators.

    ``store`` overrides ``settings.database_url``; ``clock`` drives token
    issuance and expiry.
    """
    settings = settings or Settings.from_env()
    store = store if store is not None else open_store(settings.database_url)
    tokens = SessionTokens(
        settings.secret_key,
        ttl_seconds=settings.session_ttl_seconds,
        clock=clock or time.time,
    )
    flow = AuthFlow(store, tokens, build_hasher(settings.hash_time_cost))

    if settings.uses_default_secret:
        logger.warning("No secret key configured; falling back to the built-in insecure default")

    app = FastAPI()
    app.state.settings = settings
    app.state.flow = flow

    bind_request_logging(app)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    @app.get("/")
    def home():
        return RedirectResponse(url="/register", status_code=303)

    @app.get("/register", response_class=HTMLResponse)
    def register_get(request: Request):
        return _render(request, "register.html")

    @app.post("/register")
    def register_post(
        request: Request,
        name: str = Form(""),
        email: str = Form(""),
        password: str = Form(""),
    ):
        result = flow.register(name=name, email=email, password=password)
        if isinstance(result, Err):
            return _render(request, "register.html", {"error": result.error.message, "name": name, "email": email})
        return RedirectResponse(url="/login", status_code=303)

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request):
        return _render(request, "login.html")

    @app.post("/login")
    def login_post(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
    ):
        result = flow.login(email=email, password=password)
        if isinstance(result, Err):
            return _render(request, "login.html", {"error": result.error.message, "email": email})
        resp = RedirectResponse(url="/secrets", status_code=303)
        resp.set_cookie(COOKIE_NAME, result.value.token, **cookie_settings(settings))
        return resp

    @app.get("/secrets", response_class=HTMLResponse)
    def secrets_page(request: Request, claim: SessionClaim = Depends(require_session)):
        return _render(request, "secrets.html", {"user": claim})

    @app.get("/logout")
    def logout(request: Request):
        resp = RedirectResponse(url="/login", status_code=303)
        resp.delete_cookie(COOKIE_NAME)
        return resp

    logger.info(f"App ready (store: {type(store).__name__}, session ttl: {settings.session_ttl_seconds}s)")
    return app
