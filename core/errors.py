"""
Custom error types for the markdown formatter.

Provides user-friendly error messages and structured error handling. Every
error carries a stable ``code`` so callers can surface it without parsing
the message.
"""

from typing import Any

# =============================================================================
# Base Exception Hierarchy
# =============================================================================


class FormatterError(Exception):
    """Base exception for all markdown formatter errors."""

    code = "TOOL_ERROR"

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for a caller-facing payload."""
        return {"ok": False, "code": self.code, "error": str(self)}


# =============================================================================
# Validation Errors
# =============================================================================


class InvalidInputError(FormatterError):
    """Raised when required input text is empty or malformed."""

    code = "INVALID_INPUT"


# =============================================================================
# Authentication / Configuration Errors
# =============================================================================


class AuthenticationError(FormatterError):
    """Raised when authentication fails or credentials are invalid."""

    pass


class NotAuthenticatedError(AuthenticationError):
    """Raised when no usable stored credential exists."""

    code = "NOT_AUTHED"

    def __init__(self, message: str = "Not connected to Google.", token_file: str | None = None):
        super().__init__(message)
        self.token_file = token_file


class MissingConfigurationError(FormatterError):
    """Raised when the OAuth client configuration is absent."""

    code = "MISSING_OAUTH_CONFIG"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Missing Google OAuth config. Set GOOGLE_OAUTH_CLIENT_ID and GOOGLE_OAUTH_CLIENT_SECRET."
        )


# =============================================================================
# API Errors
# =============================================================================


class APIError(FormatterError):
    """Raised for remote document store errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.status_code is not None:
            payload["status"] = self.status_code
        return payload


class RemoteNotFoundError(APIError):
    """Raised when the target document doesn't exist or is invisible (404)."""

    code = "DOC_NOT_FOUND"

    def __init__(self, document_id: str | None = None, message: str | None = None):
        super().__init__(
            message or f"Document not found or you do not have access to it: {document_id or 'unknown'}",
            status_code=404,
        )
        self.document_id = document_id


class RemoteForbiddenError(APIError):
    """Raised when the remote store denies the request (403)."""

    code = "GOOGLE_FORBIDDEN"

    def __init__(self, document_id: str | None = None, message: str | None = None):
        super().__init__(
            message
            or "Access denied by Google. Ensure you are connected with the right account and have edit access.",
            status_code=403,
        )
        self.document_id = document_id


class TransientToolError(APIError):
    """Generic failure talking to the remote store; not retried automatically."""

    code = "TOOL_ERROR"


# =============================================================================
# Access Errors
# =============================================================================

EDIT_ACCESS_GUIDANCE = (
    "In Google Docs: Share -> General access -> set to 'Anyone with the link' and Role 'Editor' "
    "(or add your account as Editor). After cleaning, lock it again if needed."
)


class NoEditAccessError(FormatterError):
    """Raised when the authenticated account cannot edit the target document."""

    code = "NO_EDIT_ACCESS"

    def __init__(
        self,
        file_id: str,
        name: str | None = None,
        can_edit: bool = False,
        can_share: bool = False,
        owned_by_me: bool = False,
        guidance: str = EDIT_ACCESS_GUIDANCE,
    ):
        super().__init__("No edit access to this document. Ask the owner to grant edit access, then retry.")
        self.file_id = file_id
        self.name = name
        self.can_edit = can_edit
        self.can_share = can_share
        self.owned_by_me = owned_by_me
        self.guidance = guidance

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["file"] = {
            "id": self.file_id,
            "name": self.name,
            "canEdit": self.can_edit,
            "canShare": self.can_share,
            "ownedByMe": self.owned_by_me,
        }
        payload["guidance"] = self.guidance
        return payload


def format_error(operation: str, error: FormatterError) -> str:
    """Format an error for display to the user."""
    return f"{operation} failed: {error}"
