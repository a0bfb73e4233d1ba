from __future__ import annotations


class AccountError(Exception):
    """Base class for failures raised by the account layer."""

    status_code = 500
    code = "account_error"
    default_message = "Account operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AccountError):
    status_code = 400
    code = "invalid_input"
    default_message = "Invalid input"


class Unauthorized(AccountError):
    status_code = 401
    code = "unauthorized"
    default_message = "Invalid credentials"


class Forbidden(AccountError):
    status_code = 403
    code = "forbidden"
    default_message = "Admin privileges required"


class NotFound(AccountError):
    status_code = 404
    code = "not_found"
    default_message = "User not found"


class Conflict(AccountError):
    status_code = 409
    code = "conflict"
    default_message = "User already exists"


class StaleDocument(Conflict):
    code = "stale_document"
    default_message = "User data was modified concurrently, please retry"


class StorageUnavailable(AccountError):
    status_code = 500
    code = "storage_unavailable"
    default_message = "User storage unavailable"
