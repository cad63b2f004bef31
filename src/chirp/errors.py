# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error types raised by the credential and session core.

Every error carries a stable ``code`` and the HTTP status the adapter answers
with. Crypto and storage failures keep their cause out of ``to_dict()``.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Optional


class ChirpError(Exception):
    code = "chirp_error"
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    public = True

    def __init__(self, message: str = "", *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        if not self.public:
            return {"error": self.code}
        payload: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload


# Validation

class ValidationError(ChirpError):
    code = "validation_error"
    status = HTTPStatus.UNPROCESSABLE_ENTITY

    def formatted_error(self) -> str:
        return self.message


class TooLong(ValidationError):
    code = "too_long"

    def __init__(self, field: str, max_chars: int, length: int) -> None:
        super().__init__(
            f"{field} is too long. Must be at most {max_chars} characters.",
            details={"field": field, "max_chars": max_chars, "length": length},
        )
        self.field = field
        self.max_chars = max_chars


# Crypto

class CryptoError(ChirpError):
    code = "server_error"
    public = False


class HashingFailed(CryptoError):
    pass


class CorruptHash(CryptoError):
    pass


class CorruptSignature(CryptoError):
    pass


# Credentials

class CredentialError(ChirpError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class InvalidCredentials(CredentialError):
    def __init__(self) -> None:
        super().__init__("invalid credentials")


# Storage

class StorageError(ChirpError):
    code = "storage_error"
    public = False


class NotFound(StorageError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, kind: str, key: Any) -> None:
        super().__init__(f"{kind} not found", details={"kind": kind})
        self.kind = kind
        self.key = key


class HandleTaken(StorageError):
    code = "handle_taken"
    status = HTTPStatus.CONFLICT

    def __init__(self, handle: str) -> None:
        super().__init__(f"handle already in use: {handle}")
        self.handle = handle


class RegistrationFailed(ChirpError):
    code = "registration_failed"
    status = HTTPStatus.CONFLICT

    def __init__(self) -> None:
        super().__init__("That username is not available.")


# Sessions

class SessionError(ChirpError):
    code = "invalid_session"
    status = HTTPStatus.UNAUTHORIZED


class InvalidSession(SessionError):
    def __init__(self) -> None:
        super().__init__("session is missing, invalid or expired")
