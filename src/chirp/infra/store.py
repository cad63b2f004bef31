# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Storage backends for users and sessions.

The core only talks to the ``Store`` protocol. Two implementations ship:
an in-memory one (tests, ephemeral runs) and a YAML-file one that persists
to ``CHIRP_STORE_PATH``. Each call takes the store lock once, so every call
is atomic on its own.
"""

from __future__ import annotations

import os
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union
from uuid import UUID, uuid4

import yaml

from chirp.core.models import Session, User, utcnow
from chirp.core.text import DisplayName, Handle
from chirp.errors import HandleTaken, NotFound, TooLong

HandleLike = Union[Handle, str]


class Store(Protocol):
    def create_user(self, password_hash: str, handle: HandleLike) -> UUID: ...

    def get_password_hash(self, handle: HandleLike) -> str: ...

    def find_user(self, handle: HandleLike) -> User: ...

    def get_user(self, user_id: UUID) -> User: ...

    def create_session(self, user_id: UUID, duration: timedelta, fingerprint: Dict[str, Any]) -> Session: ...

    def get_session(self, session_id: UUID) -> Session: ...


def _key(handle: HandleLike) -> str:
    return handle.value if isinstance(handle, Handle) else str(handle)


class MemoryStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._sessions: Dict[UUID, Session] = {}

    def create_user(self, password_hash: str, handle: HandleLike) -> UUID:
        handle = handle if isinstance(handle, Handle) else Handle(handle)
        with self._lock:
            self._refresh()
            if handle.value in self._users:
                raise HandleTaken(handle.value)
            user = User(id=uuid4(), handle=handle, password_hash=password_hash, created_at=utcnow())
            self._users[handle.value] = user
            try:
                self._persist()
            except BaseException:
                del self._users[handle.value]
                raise
            return user.id

    def get_password_hash(self, handle: HandleLike) -> str:
        return self.find_user(handle).password_hash

    def find_user(self, handle: HandleLike) -> User:
        with self._lock:
            self._refresh()
            user = self._users.get(_key(handle))
        if user is None:
            raise NotFound("user", _key(handle))
        return user

    def get_user(self, user_id: UUID) -> User:
        with self._lock:
            self._refresh()
            for user in self._users.values():
                if user.id == user_id:
                    return user
        raise NotFound("user", user_id)

    def create_session(self, user_id: UUID, duration: timedelta, fingerprint: Dict[str, Any]) -> Session:
        now = utcnow()
        with self._lock:
            self._refresh()
            session_id = uuid4()
            while session_id in self._sessions:
                session_id = uuid4()
            session = Session(
                id=session_id,
                user_id=user_id,
                created_at=now,
                expires_at=now + duration,
                fingerprint=dict(fingerprint),
            )
            previous = self._sessions
            self._sessions = {sid: s for sid, s in previous.items() if not s.is_expired(now)}
            self._sessions[session_id] = session
            try:
                self._persist()
            except BaseException:
                self._sessions = previous
                raise
            return session

    def get_session(self, session_id: UUID) -> Session:
        with self._lock:
            self._refresh()
            session = self._sessions.get(session_id)
        if session is None:
            raise NotFound("session", session_id)
        return session

    def _refresh(self) -> None:
        pass

    def _persist(self) -> None:
        pass


def default_store_path() -> Path:
    data_dir = Path(os.getenv("CHIRP_DATA_DIR", "data"))
    return Path(os.getenv("CHIRP_STORE_PATH", str(data_dir / "store.yml"))).resolve()


def _dt(raw: Any) -> datetime:
    return raw if isinstance(raw, datetime) else datetime.fromisoformat(str(raw))


def _load_user(handle: str, udata: Dict[str, Any]) -> Optional[User]:
    try:
        h = Handle(handle)
    except TooLong:
        return None
    name = udata.get("display_name")
    try:
        display_name = DisplayName(str(name)) if name else None
    except TooLong:
        display_name = None
    return User(
        id=UUID(str(udata["id"])),
        handle=h,
        password_hash=str(udata.get("password_hash") or ""),
        created_at=_dt(udata["created_at"]),
        display_name=display_name,
        email=udata.get("email") or None,
    )


class YamlStore(MemoryStore):
    """Single-file store. Picks up edits made by other processes (mtime check)."""

    def __init__(self, path: Optional[Path] = None) -> None:
        super().__init__()
        self.path = Path(path) if path else default_store_path()
        self._mtime = 0.0

    def _refresh(self) -> None:
        try:
            mtime = self.path.stat().st_mtime if self.path.exists() else 0.0
        except OSError:
            mtime = 0.0
        if mtime == self._mtime:
            return

        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) if mtime else None
        raw = raw if isinstance(raw, dict) else {}
        users: Dict[str, User] = {}
        for handle, udata in (raw.get("users") or {}).items():
            if not isinstance(udata, dict):
                continue
            user = _load_user(str(handle), udata)
            if user is not None:
                users[user.handle.value] = user
        sessions: Dict[UUID, Session] = {}
        for sid, sdata in (raw.get("sessions") or {}).items():
            if not isinstance(sdata, dict):
                continue
            session = Session(
                id=UUID(str(sid)),
                user_id=UUID(str(sdata["user_id"])),
                created_at=_dt(sdata["created_at"]),
                expires_at=_dt(sdata["expires_at"]),
                fingerprint=dict(sdata.get("fingerprint") or {}),
            )
            sessions[session.id] = session
        self._users = users
        self._sessions = sessions
        self._mtime = mtime

    def _persist(self) -> None:
        raw = {
            "version": 1,
            "users": {
                handle: {
                    "id": str(u.id),
                    "display_name": u.display_name.value if u.display_name else None,
                    "email": u.email,
                    "password_hash": u.password_hash,
                    "created_at": u.created_at.isoformat(),
                }
                for handle, u in self._users.items()
            },
            "sessions": {
                str(s.id): {
                    "user_id": str(s.user_id),
                    "created_at": s.created_at.isoformat(),
                    "expires_at": s.expires_at.isoformat(),
                    "fingerprint": dict(s.fingerprint),
                }
                for s in self._sessions.values()
            },
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
        os.replace(tmp, self.path)
        self._mtime = self.path.stat().st_mtime


def store_from_env() -> Store:
    kind = os.getenv("CHIRP_STORE", "yaml").strip().lower()
    if kind == "memory":
        return MemoryStore()
    if kind == "yaml":
        return YamlStore()
    raise ValueError(f"Unknown CHIRP_STORE: {kind}")
