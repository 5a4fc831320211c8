"""Error hierarchy for eco9.

Every error carries a code and an HTTP status; to_response() builds the JSON
envelope returned by the API handlers in main.py.
"""

from datetime import datetime, timezone


class Eco9Error(Exception):
    """Base exception for all eco9 errors."""

    def __init__(self, message: str, code: str, http_status: int = 500, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        body = {
            "success": False,
            "message": self.message,
            "error_code": self.code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if self.details:
            body["details"] = self.details
        return body


# ─── Domain errors (400-level) ──────────────────────────────────

class InvalidArgumentError(Eco9Error):
    """Caller supplied a value the boundary refuses to pass on."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", 400,
            {"field": field} if field else None,
        )
        self.field = field


class ActivityNotFoundError(Eco9Error):
    def __init__(self, activity_id: str):
        super().__init__(f"Activity '{activity_id}' not found", "ACTIVITY_NOT_FOUND", 404)
        self.activity_id = activity_id


# ─── Infrastructure errors (500-level) ──────────────────────────

class StorageError(Eco9Error):
    """Activity store operation failed."""

    def __init__(self, message: str, operation: str):
        super().__init__(f"Storage {operation} failed: {message}", "STORAGE_ERROR", 503)
        self.operation = operation
