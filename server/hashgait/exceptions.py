"""Exceptions raised across the HashGait services."""


class HashGaitError(Exception):
    """Base class for HashGait errors."""


class NoCaptureDataError(HashGaitError):
    """Capture window closed without a single sample on any stream."""

    def __init__(self, message: str = "No data collected. Please interact with the screen during capture"):
        super().__init__(message)


class NotEnrolledError(HashGaitError):
    """Verification requested for a user with no stored reference pattern."""

    def __init__(self, user_id: str | None = None):
        self.user_id = user_id
        message = "No patterns found for user"
        if user_id:
            message = f"{message} {user_id}"
        super().__init__(message)


class BackendUnavailableError(HashGaitError):
    """Hash backend timed out, refused the connection or answered with an error."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")
