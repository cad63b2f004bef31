# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Register and login.

Both flows run ``validate -> hash|verify -> store -> issue session``. Any
failure raises before ``new_session`` is reached, so no session exists
without a fresh registration or a matching password.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Union

import structlog

from chirp.auth.passwords import ParsedHash, deserialize_hash, dummy_hash, hash_password, verify_password
from chirp.auth.session import new_session
from chirp.auth.signing import SigningKeys
from chirp.core.endpoint import CreateUser, CreateUserOk, Login, LoginOk
from chirp.core.models import utcnow
from chirp.core.text import Handle, Password
from chirp.errors import HandleTaken, InvalidCredentials, NotFound, RegistrationFailed, TooLong
from chirp.infra.store import Store

log = structlog.get_logger()


def register(req: CreateUser, store: Store, keys: SigningKeys) -> CreateUserOk:
    handle = Handle.new(req.username)
    password = Password.new(req.password)

    password_hash = hash_password(password)
    try:
        user_id = store.create_user(password_hash, handle)
    except HandleTaken:
        log.info("registration conflict", username=handle.value)
        raise RegistrationFailed() from None
    log.info("new user created", username=handle.value)

    issued = new_session(store, keys, user_id)
    return CreateUserOk(
        user_id=user_id,
        username=handle.value,
        session_signature=issued.signature,
        session_id=issued.session.id,
        session_expires=utcnow() + issued.duration,
    )


def _check_credentials(username: str, password: str, store: Store) -> None:
    """Verify a handle/password pair.

    Unknown handles, over-long input and wrong passwords all end in the same
    InvalidCredentials, and every path runs exactly one argon2 verification.
    """
    parsed: Optional[ParsedHash] = None
    try:
        parsed = deserialize_hash(store.get_password_hash(Handle.new(username)))
    except (NotFound, TooLong):
        parsed = None

    try:
        candidate = Password.new(password)
    except TooLong:
        candidate = None

    verify_password(
        candidate if candidate is not None else "",
        parsed if parsed is not None else dummy_hash(),
    )
    if parsed is None or candidate is None:
        raise InvalidCredentials()


def login(req: Login, store: Store, keys: SigningKeys) -> LoginOk:
    # Client input, cut to the longest handle that can exist.
    username = req.username[: Handle.MAX_CHARS]
    log.info("logging in", username=username)
    try:
        _check_credentials(req.username, req.password, store)
    except InvalidCredentials:
        log.info("login rejected", username=username)
        raise

    user = store.find_user(Handle.new(req.username))
    issued = new_session(store, keys, user.id)
    return LoginOk(
        session_id=issued.session.id,
        session_expires=utcnow() + issued.duration,
        session_signature=issued.signature,
        display_name=user.display_name.value if user.display_name else None,
        email=user.email,
        profile_image=None,
        user_id=user.id,
    )


Request = Union[CreateUser, Login]
Response = Union[CreateUserOk, LoginOk]

HANDLERS: Dict[type, Callable[[Request, Store, SigningKeys], Response]] = {
    CreateUser: register,
    Login: login,
}


def process(req: Request, store: Store, keys: SigningKeys) -> Response:
    handler = HANDLERS.get(type(req))
    if handler is None:
        raise TypeError(f"Unsupported request: {type(req).__name__}")
    return handler(req, store, keys)
