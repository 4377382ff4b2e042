"""
Error taxonomy shared by every feature package.

Routers and store functions raise these; the handlers registered in
``backend.main`` turn them into the common ``{success, message, errors}``
envelope with the matching HTTP status.
"""

from typing import List, Optional


class EduSafeError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(EduSafeError):
    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: Optional[List[str]] = None):
        super().__init__(message, errors)


class NotFoundError(EduSafeError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class InvalidIdError(NotFoundError):
    """Malformed id; rejected before the store is touched."""

    status_code = 400

    def __init__(self, resource: str = "Resource"):
        super().__init__(resource)
        self.message = f"Invalid {resource.lower()} ID format"
        self.args = (self.message,)


class ForbiddenError(EduSafeError):
    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class AuthError(EduSafeError):
    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class ConflictError(EduSafeError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)


class IntegrityError(EduSafeError):
    """A document about to be saved breaks a store invariant."""

    status_code = 500
