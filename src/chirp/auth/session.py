# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

import structlog

from chirp.auth.signing import SigningKeys, decode_base64, encode_base64, verify_signature
from chirp.core.models import SESSION_DURATION, Session
from chirp.errors import CorruptSignature
from chirp.infra.store import Store

log = structlog.get_logger()


@dataclass(frozen=True)
class IssuedSession:
    session: Session
    signature: str
    duration: timedelta


def new_session(store: Store, keys: SigningKeys, user_id: UUID) -> IssuedSession:
    fingerprint: dict = {}
    duration = SESSION_DURATION
    session = store.create_session(user_id, duration, fingerprint)

    signature = encode_base64(keys.sign(session.id.bytes))
    log.info("session issued", user_id=str(user_id), session_id=str(session.id))
    return IssuedSession(session=session, signature=signature, duration=duration)


def verify_session_signature(keys: SigningKeys, session_id: UUID, signature: str) -> bool:
    try:
        raw = decode_base64(signature)
    except CorruptSignature:
        return False
    return verify_signature(keys.public, session_id.bytes, raw)
