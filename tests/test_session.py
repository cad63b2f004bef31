from datetime import timedelta

from chirp.auth.session import new_session, verify_session_signature
from chirp.core.models import SESSION_DURATION


def test_session_duration_is_three_weeks():
    assert SESSION_DURATION == timedelta(weeks=3)


def test_new_session_signs_its_id(store, keys):
    user_id = store.create_user("hash", "alice")
    issued = new_session(store, keys, user_id)

    assert issued.session.user_id == user_id
    assert issued.session.fingerprint == {}
    assert issued.duration == SESSION_DURATION
    assert issued.session.expires_at - issued.session.created_at == SESSION_DURATION
    assert verify_session_signature(keys, issued.session.id, issued.signature)
    assert store.get_session(issued.session.id) == issued.session


def test_two_sessions_are_distinct_and_not_interchangeable(store, keys):
    user_id = store.create_user("hash", "alice")
    a = new_session(store, keys, user_id)
    b = new_session(store, keys, user_id)

    assert a.session.id != b.session.id
    assert a.signature != b.signature
    assert not verify_session_signature(keys, a.session.id, b.signature)
    assert not verify_session_signature(keys, b.session.id, a.signature)


def test_garbage_signature_rejected(store, keys):
    issued = new_session(store, keys, store.create_user("hash", "alice"))
    assert not verify_session_signature(keys, issued.session.id, "%%%")


def test_session_expiry(store, keys):
    session = new_session(store, keys, store.create_user("hash", "alice")).session
    assert not session.is_expired()
    assert session.is_expired(session.expires_at + timedelta(seconds=1))
    assert not session.is_expired(session.expires_at)
