import uuid

import pytest

from chirp.auth.signing import SigningKeys, decode_base64, encode_base64, verify_signature
from chirp.errors import CorruptSignature


def _flip(data: bytes, bit: int) -> bytes:
    out = bytearray(data)
    out[bit // 8] ^= 1 << (bit % 8)
    return bytes(out)


def test_sign_verify_roundtrip(keys):
    message = uuid.uuid4().bytes
    sig = keys.sign(message)
    assert verify_signature(keys.public, message, sig)
    assert keys.verify(message, sig)


def test_signing_is_deterministic(keys):
    message = uuid.uuid4().bytes
    assert keys.sign(message) == keys.sign(message)


def test_any_bit_flip_in_message_fails(keys):
    message = uuid.uuid4().bytes
    sig = keys.sign(message)
    for bit in range(len(message) * 8):
        assert not verify_signature(keys.public, _flip(message, bit), sig)


def test_any_bit_flip_in_signature_fails(keys):
    message = uuid.uuid4().bytes
    sig = keys.sign(message)
    for bit in range(len(sig) * 8):
        assert not verify_signature(keys.public, message, _flip(sig, bit))


def test_other_key_rejects(keys):
    message = uuid.uuid4().bytes
    assert not verify_signature(SigningKeys.generate().public, message, keys.sign(message))


def test_truncated_signature_rejected(keys):
    message = uuid.uuid4().bytes
    assert not verify_signature(keys.public, message, keys.sign(message)[:-1])


def test_base64_roundtrip(keys):
    sig = keys.sign(b"abc")
    text = encode_base64(sig)
    assert isinstance(text, str) and text
    assert decode_base64(text) == sig


@pytest.mark.parametrize("text", ["not base64!", "abc", "ñ"])
def test_decode_rejects_garbage(text):
    with pytest.raises(CorruptSignature):
        decode_base64(text)


def test_pem_roundtrip(keys, tmp_path):
    path = tmp_path / "key.pem"
    path.write_bytes(keys.private_pem())
    loaded = SigningKeys.from_file(path)
    message = b"session"
    assert verify_signature(keys.public, message, loaded.sign(message))
    assert loaded.public_pem() == keys.public_pem()


def test_repr_hides_key(keys):
    assert "PRIVATE" not in repr(keys)
