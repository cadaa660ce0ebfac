"""Unit tests for signed share invitation tokens."""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from notus.config import InviteSettings
from notus.core.errors import InvalidTokenError, MalformedTokenError
from notus.core.models.share import SharePermission
from notus.security.invite_tokens import INVITE_TOKEN_TYPE, InviteTokenSigner


@pytest.fixture
def config():
    return InviteSettings(
        secret="invite-secret",
        algorithm="HS256",
        lifetime=timedelta(days=2),
        base_url="http://app.test/",
    )


@pytest.fixture
def signer(config):
    return InviteTokenSigner(config)


def test_issue_then_verify(signer):
    token, issued = signer.issue(123, " Bob@Example.com ", SharePermission.READ_WRITE)

    claims = signer.verify(token)
    assert claims.document_id == 123
    assert claims.email == "bob@example.com"
    assert claims.permission is SharePermission.READ_WRITE
    assert claims.jti == issued.jti
    assert 0 < claims.remaining_seconds() <= 2 * 24 * 3600


def test_payload_uses_wire_claim_names(signer, config):
    token, _ = signer.issue(7, "bob@example.com", SharePermission.READ)
    payload = jwt.decode(token, config.secret, algorithms=[config.algorithm])
    assert payload["id_doc"] == 7
    assert payload["email"] == "bob@example.com"
    assert payload["permission"] == "read"
    assert payload["type"] == INVITE_TOKEN_TYPE
    assert payload["exp"] - payload["iat"] == 2 * 24 * 3600


def test_token_older_than_two_days_is_rejected(signer):
    past = datetime.now(timezone.utc) - timedelta(days=2, minutes=1)
    token, _ = signer.issue(1, "bob@example.com", SharePermission.READ, now=past)
    with pytest.raises(InvalidTokenError):
        signer.verify(token)


def test_tampered_token_is_rejected(signer):
    token, _ = signer.issue(1, "bob@example.com", SharePermission.READ)
    head, body, sig = token.split(".")
    payload = json.loads(base64.urlsafe_b64decode(body + "=" * (-len(body) % 4)))
    payload["id_doc"] = 999
    forged_body = base64.urlsafe_b64encode(json.dumps(payload).encode()).rstrip(b"=").decode()
    with pytest.raises(InvalidTokenError):
        signer.verify(".".join([head, forged_body, sig]))


def test_token_signed_with_another_secret_is_rejected(signer, config):
    other = InviteTokenSigner(
        InviteSettings(secret="other", algorithm="HS256", lifetime=config.lifetime, base_url=config.base_url)
    )
    token, _ = other.issue(1, "bob@example.com", SharePermission.READ)
    with pytest.raises(InvalidTokenError):
        signer.verify(token)


def test_missing_claims_are_malformed(signer, config):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode({"type": INVITE_TOKEN_TYPE, "email": "bob@example.com", "exp": exp}, config.secret)
    with pytest.raises(MalformedTokenError):
        signer.verify(token)

    token = jwt.encode({"type": INVITE_TOKEN_TYPE, "id_doc": 1, "exp": exp}, config.secret)
    with pytest.raises(MalformedTokenError):
        signer.verify(token)


def test_unknown_permission_is_malformed(signer, config):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode(
        {"type": INVITE_TOKEN_TYPE, "id_doc": 1, "email": "bob@example.com", "permission": "owner", "exp": exp},
        config.secret,
    )
    with pytest.raises(MalformedTokenError):
        signer.verify(token)


def test_access_token_is_not_an_invite(signer, config):
    token = jwt.encode({"sub": "1", "type": "access", "id_doc": 1, "email": "bob@example.com"}, config.secret)
    with pytest.raises(InvalidTokenError):
        signer.verify(token)


def test_empty_token_is_rejected(signer):
    with pytest.raises(InvalidTokenError):
        signer.verify("")


def test_confirm_url(config):
    assert config.confirm_url("abc") == "http://app.test/api/confirm-share?token=abc"
