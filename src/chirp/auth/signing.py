# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session id signing.

One Ed25519 key pair per process, built at startup and handed to whoever
signs or verifies. Ed25519 signatures are deterministic; key generation
draws from the OS CSPRNG, which is safe to share across threads.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from chirp.errors import CorruptSignature


class SigningKeys:
    def __init__(self, private_key: ed25519.Ed25519PrivateKey) -> None:
        self._private = private_key
        self.public = private_key.public_key()

    @classmethod
    def generate(cls) -> "SigningKeys":
        return cls(ed25519.Ed25519PrivateKey.generate())

    @classmethod
    def from_pem(cls, data: Union[bytes, str], password: Optional[bytes] = None) -> "SigningKeys":
        if isinstance(data, str):
            data = data.encode("ascii")
        key = serialization.load_pem_private_key(data, password=password)
        if not isinstance(key, ed25519.Ed25519PrivateKey):
            raise ValueError("signing key must be an Ed25519 private key")
        return cls(key)

    @classmethod
    def from_file(cls, path: Path) -> "SigningKeys":
        return cls.from_pem(Path(path).read_bytes())

    def sign(self, message: bytes) -> bytes:
        return self._private.sign(message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify_signature(self.public, message, signature)

    def public_pem(self) -> bytes:
        return self.public.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def private_pem(self) -> bytes:
        return self._private.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def __repr__(self) -> str:
        return "SigningKeys(<ed25519>)"


def verify_signature(public_key: ed25519.Ed25519PublicKey, message: bytes, signature: bytes) -> bool:
    try:
        public_key.verify(signature, message)
    except InvalidSignature:
        return False
    return True


def encode_base64(signature: bytes) -> str:
    return base64.b64encode(signature).decode("ascii")


def decode_base64(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError):
        raise CorruptSignature("signature is not valid base64") from None
