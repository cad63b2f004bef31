# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Bounded text values.

Each type wraps a string and checks its length (in characters) when built.
There is no other normalization: no trimming, no case folding. Instances are
frozen, so a value that passed the check keeps passing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from chirp.errors import TooLong


@dataclass(frozen=True, order=True)
class BoundedText:
    value: str

    MAX_CHARS: ClassVar[int] = 0
    FIELD: ClassVar[str] = "Text"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"{type(self).__name__} expects str, got {type(self.value).__name__}")
        length = len(self.value)
        if length > self.MAX_CHARS:
            raise TooLong(self.FIELD, self.MAX_CHARS, length)

    @classmethod
    def new(cls, raw: str):
        return cls(raw)

    def __str__(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value)


class Handle(BoundedText):
    MAX_CHARS = 30
    FIELD = "Username"


class DisplayName(BoundedText):
    MAX_CHARS = 30
    FIELD = "Display name"


class Headline(BoundedText):
    MAX_CHARS = 30
    FIELD = "Headline"


class Message(BoundedText):
    MAX_CHARS = 100
    FIELD = "Message"


class Password(BoundedText):
    # Upper bound keeps argon2 input size predictable.
    MAX_CHARS = 128
    FIELD = "Password"

    def __repr__(self) -> str:
        return "Password('***')"

    def __str__(self) -> str:
        return "***"
