import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import pytest
from argon2 import PasswordHasher
from fastapi.testclient import TestClient

from chirp.app import create_app
from chirp.auth import passwords
from chirp.auth.signing import SigningKeys
from chirp.infra.store import MemoryStore


@pytest.fixture(autouse=True)
def fast_hasher():
    # Minimal argon2 cost so the suite stays quick; production uses the library defaults.
    passwords.configure_hasher(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))
    yield
    passwords.configure_hasher(passwords.build_hasher())


@pytest.fixture()
def keys() -> SigningKeys:
    return SigningKeys.generate()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def client(store, keys) -> TestClient:
    return TestClient(create_app(store=store, keys=keys))
