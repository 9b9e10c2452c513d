"""Domain errors raised by the service layer.

Each error knows the HTTP status it maps to; ``main`` registers a single
handler that renders them as ``{"message", "code", "details"}``.
"""


class PeerLearnError(Exception):
    """Base error."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str, details: dict = None, code: str = None):
        self.message = message
        self.details = details
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_dict(self):
        body = {"message": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(PeerLearnError):
    """Missing or malformed input."""

    status_code = 400
    code = "validation_error"


class Conflict(PeerLearnError):
    """Duplicate email, enrollment or order."""

    status_code = 400
    code = "conflict"


class AuthenticationFailed(PeerLearnError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "INVALID_TOKEN"


class PermissionDenied(PeerLearnError):
    """Authenticated, but the role or ownership does not allow it."""

    status_code = 403
    code = "forbidden"


class NotFound(PeerLearnError):
    status_code = 404
    code = "not_found"
