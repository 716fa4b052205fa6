"""
Error taxonomy shared by the admin API and the privileged functions.

Every error carries the HTTP status it maps to; the handlers registered in
backoffice.main render them as {"detail": message}. The functions routes
render them as {"error": message} instead.
"""

from typing import List, Optional


class BackofficeError(Exception):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BackofficeError):
    """Form input rejected before any network call."""

    status_code = 422
    default_message = "Please fill all required fields correctly."

    def __init__(self, fields: Optional[List[str]] = None, message: Optional[str] = None):
        self.fields = list(fields or [])
        super().__init__(message)


class Unauthenticated(BackofficeError):
    status_code = 401
    default_message = "No authenticated user"


class Forbidden(BackofficeError):
    status_code = 403
    default_message = "Insufficient permissions"


class IdentityConflict(BackofficeError):
    status_code = 409
    default_message = "A user with this email address has already been registered"


class NotFound(BackofficeError):
    status_code = 404
    default_message = "Not found"


class RemoteProcedureFailure(BackofficeError):
    """Non-2xx answer from a privileged function; message comes from its {error} body.

    An upstream 4xx keeps its status; anything else is reported as 502.
    """

    status_code = 502
    default_message = "Remote procedure failed"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        if upstream_status is not None and 400 <= upstream_status < 500:
            self.status_code = upstream_status
        super().__init__(message)


class DatastoreError(BackofficeError):
    status_code = 500
    default_message = "Datastore request failed"


class StorageError(BackofficeError):
    status_code = 500
    default_message = "Failed to upload file"
