"""Sharing request schemas: camelCase keys and permission forms."""

import pytest
from pydantic import ValidationError

from notus.core.models import SharePermission
from notus.core.schemas.sharing import AccessEntryResponse, AccessListResponse, InviteShareRequest, ShareChangeRequest
from notus.core.services.access_service import GranteeByEmail, GranteeById


def test_invite_request_from_client_payload():
    req = InviteShareRequest.model_validate(
        {"documentId": 123, "email": "bob@example.com", "permission": True, "inviterName": "Alice", "docTitle": "Notes"}
    )
    assert req.document_id == 123
    assert req.permission is SharePermission.READ_WRITE
    assert req.inviter_name == "Alice"


def test_invite_request_defaults_to_read():
    req = InviteShareRequest.model_validate({"documentId": 1, "email": "bob@example.com"})
    assert req.permission is SharePermission.READ


@pytest.mark.parametrize(
    "payload",
    [
        {"documentId": "abc", "email": "bob@example.com", "permission": True},
        {"documentId": 0, "email": "bob@example.com", "permission": True},
        {"documentId": 1, "email": "not-an-email", "permission": True},
        {"documentId": 1, "email": "bob@example.com", "permission": "owner"},
    ],
)
def test_invite_request_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError):
        InviteShareRequest.model_validate(payload)


def test_share_change_needs_email_or_user_id():
    with pytest.raises(ValidationError):
        ShareChangeRequest.model_validate({"documentId": 1, "permission": True})


def test_share_change_grantee_prefers_email():
    both = ShareChangeRequest.model_validate({"documentId": 1, "email": "bob@example.com", "userId": 5})
    assert both.grantee() == GranteeByEmail(email="bob@example.com")
    assert both.permission is None

    by_id = ShareChangeRequest.model_validate({"documentId": 1, "userId": 5, "permission": "read-write"})
    assert by_id.grantee() == GranteeById(user_id=5)
    assert by_id.permission is SharePermission.READ_WRITE


def test_access_list_serializes_camel_case():
    response = AccessListResponse(access_list=[AccessEntryResponse(email="a@example.com", is_owner=True)])
    dumped = response.model_dump(by_alias=True)
    assert dumped["accessList"][0]["email"] == "a@example.com"
    assert AccessListResponse.model_validate(dumped).access_list[0].is_owner
