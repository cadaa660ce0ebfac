"""Security utilities."""

from .invite_tokens import InviteClaims, InviteTokenSigner
from .jwt import create_access_token, decode_access_token, get_user_id_from_token
from .password import hash_password, verify_and_upgrade, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "verify_and_upgrade",
    "create_access_token",
    "decode_access_token",
    "get_user_id_from_token",
    "InviteClaims",
    "InviteTokenSigner",
]
