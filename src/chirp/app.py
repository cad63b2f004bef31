# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from chirp.auth.signing import SigningKeys
from chirp.core.endpoint import CreateUser, CreateUserOk, Login, LoginOk, PublicUserProfile
from chirp.core.models import SESSION_DURATION
from chirp.errors import ChirpError
from chirp.infra.store import Store, store_from_env
from chirp.permissions import (
    COOKIE_NAME,
    SIGNATURE_COOKIE_NAME,
    CurrentSession,
    cookie_settings,
    require_session,
    to_public,
)
from chirp.services.account_service import process

log = structlog.get_logger()


def keys_from_env() -> SigningKeys:
    path = os.getenv("CHIRP_SIGNING_KEY_PATH")
    if path:
        return SigningKeys.from_file(path)
    log.warning("no signing key configured, using an ephemeral key")
    return SigningKeys.generate()


def _set_session_cookies(response: Response, session_id: str, signature: str) -> None:
    max_age = int(SESSION_DURATION.total_seconds())
    response.set_cookie(key=COOKIE_NAME, value=session_id, max_age=max_age, **cookie_settings())
    response.set_cookie(key=SIGNATURE_COOKIE_NAME, value=signature, max_age=max_age, **cookie_settings())


def create_app(store: Optional[Store] = None, keys: Optional[SigningKeys] = None) -> FastAPI:
    app = FastAPI(title="chirp")
    app.state.store = store if store is not None else store_from_env()
    app.state.keys = keys if keys is not None else keys_from_env()

    @app.exception_handler(ChirpError)
    async def _chirp_error(request: Request, exc: ChirpError):
        if not exc.public:
            log.error("request failed", path=request.url.path, error=exc.code, exc_info=exc)
        return JSONResponse(status_code=int(exc.status), content=exc.to_dict())

    @app.post("/account/register", response_model=CreateUserOk, status_code=201)
    def register_post(body: CreateUser, request: Request, response: Response):
        ok = process(body, request.app.state.store, request.app.state.keys)
        _set_session_cookies(response, str(ok.session_id), ok.session_signature)
        return ok

    @app.post("/account/login", response_model=LoginOk)
    def login_post(body: Login, request: Request, response: Response):
        ok = process(body, request.app.state.store, request.app.state.keys)
        _set_session_cookies(response, str(ok.session_id), ok.session_signature)
        return ok

    @app.get("/account/me", response_model=PublicUserProfile)
    def me(current: CurrentSession = Depends(require_session)):
        return to_public(current.user)

    return app
