"""Exception types for repcycle."""


class RepcycleError(Exception):
    """Base class for all repcycle errors."""


class ProgramValidationError(RepcycleError):
    """Raised when program generation input or selections are malformed."""


class StorageNotInitializedError(RepcycleError):
    """Raised when the plan store is used before init()."""

    def __init__(self, message: str = "Storage not initialized. Call init() first."):
        super().__init__(message)


class StravaSyncError(RepcycleError):
    """Base class for failures talking to the Strava sync relay."""


class StravaSyncNotConfiguredError(StravaSyncError):
    """Raised when no relay base URL is configured."""

    def __init__(self, message: str = "Strava sync API is not configured"):
        super().__init__(message)


class StravaSyncApiError(StravaSyncError):
    """Raised when the relay answers with a non-2xx status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class BackupValidationError(RepcycleError):
    """Raised when a backup file does not have the expected shape."""

    def __init__(self, errors: list):
        self.errors = errors
        details = ", ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Backup validation failed: {details}")


class BackupCancelledError(RepcycleError):
    """Raised when the user aborts an import or export.

    Callers treat this as a normal outcome, not a failure.
    """

    def __init__(self, message: str = "Backup cancelled"):
        super().__init__(message)


def is_cancellation(error: BaseException) -> bool:
    """Check whether an error represents a user cancellation."""
    if isinstance(error, BackupCancelledError):
        return True
    message = str(error).lower()
    return "cancelled" in message or "canceled" in message
