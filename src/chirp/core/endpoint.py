# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request and response bodies exchanged with the HTTP layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class CreateUser(BaseModel):
    username: str
    password: str


class CreateUserOk(BaseModel):
    user_id: UUID
    username: str
    session_signature: str
    session_id: UUID
    session_expires: datetime


class Login(BaseModel):
    username: str
    password: str


class LoginOk(BaseModel):
    session_id: UUID
    session_expires: datetime
    session_signature: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    profile_image: Optional[str] = None
    user_id: UUID


class PublicUserProfile(BaseModel):
    id: UUID
    display_name: Optional[str] = None
    handle: str
    profile_image: Optional[str] = None
    created_at: datetime
    am_following: bool = False
