#!/usr/bin/env python3
from __future__ import annotations

import os
import sys
from pathlib import Path

from chirp.auth.signing import SigningKeys


def main() -> None:
    target = Path(sys.argv[1] if len(sys.argv) > 1 else os.getenv("CHIRP_SIGNING_KEY_PATH", "data/signing_key.pem"))
    if target.exists():
        raise SystemExit(f"Refusing to overwrite {target}")
    target.parent.mkdir(parents=True, exist_ok=True)

    keys = SigningKeys.generate()
    target.write_bytes(keys.private_pem())
    target.chmod(0o600)
    print(f"OK -> {target}")
    print(keys.public_pem().decode("ascii"))


if __name__ == "__main__":
    main()
