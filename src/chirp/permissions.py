# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Request

from chirp.auth.session import verify_session_signature
from chirp.core.endpoint import PublicUserProfile
from chirp.core.models import Session, User
from chirp.errors import InvalidSession, NotFound

COOKIE_NAME = os.getenv("CHIRP_COOKIE_NAME", "chirp_session")
SIGNATURE_COOKIE_NAME = f"{COOKIE_NAME}_sig"
SESSION_HEADER = "x-session-id"
SIGNATURE_HEADER = "x-session-signature"


@dataclass(frozen=True)
class CurrentSession:
    session: Session
    user: User


def load_session_from_request(request: Request) -> Optional[CurrentSession]:
    raw_id = request.headers.get(SESSION_HEADER) or request.cookies.get(COOKIE_NAME, "")
    signature = request.headers.get(SIGNATURE_HEADER) or request.cookies.get(SIGNATURE_COOKIE_NAME, "")
    if not raw_id or not signature:
        return None
    try:
        session_id = UUID(raw_id)
    except ValueError:
        return None

    if not verify_session_signature(request.app.state.keys, session_id, signature):
        return None
    store = request.app.state.store
    try:
        session = store.get_session(session_id)
        if session.is_expired():
            return None
        user = store.get_user(session.user_id)
    except NotFound:
        return None
    return CurrentSession(session=session, user=user)


def require_session(request: Request) -> CurrentSession:
    current = load_session_from_request(request)
    if current is None:
        raise InvalidSession()
    return current


def to_public(user: User) -> PublicUserProfile:
    return PublicUserProfile(
        id=user.id,
        display_name=user.display_name.value if user.display_name else None,
        handle=user.handle.value,
        profile_image=None,
        created_at=user.created_at,
        am_following=False,
    )


def cookie_settings() -> dict:
    secure = os.getenv("CHIRP_COOKIE_SECURE", "false").lower() in {"1", "true", "yes", "y"}
    return {"httponly": True, "samesite": "lax", "secure": secure}
