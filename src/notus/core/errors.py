"""
Error taxonomy shared by services and routes.

Services never let these escape: they travel inside a ``Result``. Route
guards raise them and the app-level exception handler turns them into the
``{"success": false, "error": ...}`` envelope with the matching status.
"""

from typing import Optional

from fastapi import status

ACCESS_DENIED = "Accès refusé"


class NotusError(Exception):
    """Base error. ``message`` is safe to show to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Erreur interne du serveur"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        # internal detail, logged but never rendered
        self.detail = detail
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.code}(message={self.message!r})>"


class Unauthenticated(NotusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Non authentifié"


class Forbidden(NotusError):
    """Caller is neither owner nor administrator."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = ACCESS_DENIED


class AuthorizationError(Forbidden):
    """Raised by the invite flow when the inviter does not own the document."""


class ValidationError(NotusError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Requête invalide"


class NotFoundError(NotusError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ressource introuvable"


class InvalidTokenError(NotusError):
    """Bad signature, expired or revoked invite token."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ACCESS_DENIED


class MalformedTokenError(InvalidTokenError):
    """Signature fine but required claims are missing."""


class InternalError(NotusError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
