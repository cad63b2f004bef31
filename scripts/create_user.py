#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from chirp.auth.passwords import hash_password
from chirp.core.text import Handle, Password
from chirp.errors import HandleTaken, TooLong
from chirp.infra.store import YamlStore


def main() -> None:
    store = YamlStore()

    try:
        handle = Handle.new(input("Username: ").strip())
        pw1 = Password.new(getpass("Password: "))
    except TooLong as e:
        raise SystemExit(e.formatted_error())
    pw2 = getpass("Repeat password: ")
    if pw1.value != pw2:
        raise SystemExit("Passwords do not match")

    try:
        user_id = store.create_user(hash_password(pw1), handle)
    except HandleTaken:
        raise SystemExit(f"Username already exists: {handle}")
    print(f"OK {user_id} -> {store.path}")


if __name__ == "__main__":
    main()
