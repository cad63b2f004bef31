# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from typing import Union

from argon2 import Parameters, PasswordHasher, extract_parameters
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from chirp.core.text import Password
from chirp.errors import CorruptHash, HashingFailed, InvalidCredentials


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw else default


def build_hasher() -> PasswordHasher:
    base = PasswordHasher()
    return PasswordHasher(
        time_cost=_env_int("CHIRP_ARGON2_TIME_COST", base.time_cost),
        memory_cost=_env_int("CHIRP_ARGON2_MEMORY_COST", base.memory_cost),
        parallelism=_env_int("CHIRP_ARGON2_PARALLELISM", base.parallelism),
    )


_PH: PasswordHasher
_DUMMY: "ParsedHash"


def configure_hasher(ph: PasswordHasher) -> None:
    """Install ``ph`` and rebuild the decoy hash with its parameters."""
    global _PH, _DUMMY
    dummy = deserialize_hash(ph.hash(secrets.token_urlsafe(24)))
    _PH, _DUMMY = ph, dummy


@dataclass(frozen=True)
class ParsedHash:
    encoded: str
    params: Parameters

    def __repr__(self) -> str:
        return f"ParsedHash(type={self.params.type.name}, t={self.params.time_cost}, m={self.params.memory_cost})"


def _plain(password: Union[str, Password]) -> str:
    return password.value if isinstance(password, Password) else password


def hash_password(plain: Union[str, Password]) -> str:
    try:
        return _PH.hash(_plain(plain))
    except HashingError as e:
        raise HashingFailed("password hashing failed") from e


def deserialize_hash(stored: Union[str, bytes]) -> ParsedHash:
    if isinstance(stored, bytes):
        try:
            stored = stored.decode("ascii")
        except UnicodeDecodeError:
            raise CorruptHash("stored hash is not ascii") from None
    try:
        params = extract_parameters(stored)
    except (InvalidHashError, ValueError):
        raise CorruptHash("stored hash is malformed") from None
    return ParsedHash(encoded=stored, params=params)


def verify_password(plain: Union[str, Password], parsed: ParsedHash) -> None:
    """Raise InvalidCredentials unless ``plain`` matches ``parsed``.

    The comparison itself is constant time (done by libargon2).
    """
    try:
        _PH.verify(parsed.encoded, _plain(plain))
    except VerifyMismatchError:
        raise InvalidCredentials() from None
    except (InvalidHashError, VerificationError):
        raise CorruptHash("stored hash could not be decoded") from None


def dummy_hash() -> ParsedHash:
    """Hash of random bytes, verified against when a handle does not exist.

    Built up front so an unknown handle never costs an extra hash.
    """
    return _DUMMY


configure_hasher(build_hasher())
