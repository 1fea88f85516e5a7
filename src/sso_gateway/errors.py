"""
sso_gateway.errors

Error taxonomy for the gateway.

Responsibilities:
- Define the caller-facing errors with a status code and a stable reason code.
- Define collaborator failures raised by User Directory / Session Store implementations.
"""

from __future__ import annotations


class GatewayError(Exception):
    """
    Base class for errors rendered to the caller as `{success, message, reason}`.
    """

    status_code: int = 500
    reason: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class InvalidCredentials(GatewayError):
    status_code = 401
    reason = "invalid_credentials"
    default_message = "Invalid username or password"


class AccountDisabled(InvalidCredentials):
    # Same wire representation as InvalidCredentials; only server logs tell them apart.
    pass


class Unauthenticated(GatewayError):
    status_code = 401
    reason = "unauthenticated"
    default_message = "Not authenticated"


class NotFound(GatewayError):
    status_code = 404
    reason = "not_found"
    default_message = "Not found"


class MethodNotAllowed(GatewayError):
    status_code = 405
    reason = "method_not_allowed"
    default_message = "Method not allowed"


class BackendUnavailable(GatewayError):
    status_code = 502
    reason = "backend_unavailable"
    default_message = "Backend service unavailable"


class InternalError(GatewayError):
    pass


class UserDirectoryError(Exception):
    pass


class UserAlreadyExists(UserDirectoryError):
    pass


class SessionStoreError(Exception):
    pass


# --- Module Notes -----------------------------------------------------------
# Collaborator errors never reach the wire directly; the Authenticator and the
# gateway middleware translate them into InternalError.
