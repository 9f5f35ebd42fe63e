"""Error taxonomy shared by every portal workflow.

Workflows raise one of these classes and nothing else; the app-level handler
in ``main.py`` turns them into ``{"detail": ..., "error": ...}`` responses.
"""

from typing import Any, Dict


class PortalError(Exception):
    """Base class for classified portal failures."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"detail": self.message, "error": self.code}


class ClientInputError(PortalError):
    """Missing or malformed request fields."""

    status_code = 400
    code = "client_input"


class PayloadTooLargeError(ClientInputError):
    status_code = 413
    code = "payload_too_large"


class AuthenticationError(PortalError):
    status_code = 401
    code = "not_authenticated"


class ForbiddenError(PortalError):
    status_code = 403
    code = "forbidden"


class NotFoundError(PortalError):
    status_code = 404
    code = "not_found"


class RecordValidationError(PortalError):
    """The record store rejected a record against its schema."""

    status_code = 400
    code = "validation_error"


class BlobInconsistencyError(PortalError):
    """A metadata record exists but its blob is gone."""

    status_code = 410
    code = "file_missing"


class ServerError(PortalError):
    status_code = 500
    code = "server_error"


class MetadataDeletionError(ServerError):
    """The blob was removed but the metadata record could not be."""

    code = "metadata_delete_failed"
