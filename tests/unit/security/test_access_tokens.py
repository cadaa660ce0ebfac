"""Unit tests for security/jwt.py and security/password.py"""

from datetime import timedelta

from jose import jwt

from notus.config import Settings
from notus.security.jwt import create_access_token, decode_access_token, get_user_id_from_token
from notus.security.password import hash_password, verify_and_upgrade, verify_password


def _settings():
    return Settings(secret_key="test-secret", algorithm="HS256", access_token_expire_minutes=30)


def test_create_and_decode_access_token():
    settings = _settings()
    token = create_access_token({"sub": "42"}, expires_delta=timedelta(minutes=5), settings=settings)

    payload = decode_access_token(token, settings)
    assert payload["sub"] == "42"
    assert payload["type"] == "access"
    assert payload["jti"]
    assert get_user_id_from_token(token, settings) == 42


def test_expired_access_token_is_rejected():
    settings = _settings()
    token = create_access_token({"sub": "42"}, expires_delta=timedelta(seconds=-5), settings=settings)
    assert decode_access_token(token, settings) is None
    assert get_user_id_from_token(token, settings) is None


def test_wrong_secret_and_wrong_type_are_rejected():
    settings = _settings()
    foreign = create_access_token({"sub": "42"}, settings=Settings(secret_key="other"))
    assert decode_access_token(foreign, settings) is None

    invite_like = jwt.encode({"sub": "42", "type": "share_invite"}, settings.secret_key, algorithm="HS256")
    assert decode_access_token(invite_like, settings) is None


def test_non_numeric_subject_yields_no_user_id():
    settings = _settings()
    token = create_access_token({"sub": "not-a-number"}, settings=settings)
    assert get_user_id_from_token(token, settings) is None


def test_password_hash_roundtrip_and_long_passwords():
    hashed = hash_password("TestPassword123!")
    assert hashed != "TestPassword123!"
    assert verify_password("TestPassword123!", hashed)
    assert not verify_password("wrong", hashed)

    # past bcrypt's 72 byte limit the tail still matters
    long_a = "a" * 80 + "1"
    long_b = "a" * 80 + "2"
    assert not verify_password(long_b, hash_password(long_a))


def test_verify_and_upgrade_keeps_current_hashes():
    hashed = hash_password("TestPassword123!")
    valid, new_hash = verify_and_upgrade("TestPassword123!", hashed)
    assert valid
    assert new_hash is None

    valid, new_hash = verify_and_upgrade("wrong", hashed)
    assert not valid
    assert new_hash is None
