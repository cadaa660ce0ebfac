"""Request-level dependencies."""

from .auth import ensure_can_manage_shares, get_current_user, get_current_user_id, require_admin

__all__ = ["get_current_user", "get_current_user_id", "require_admin", "ensure_can_manage_shares"]
