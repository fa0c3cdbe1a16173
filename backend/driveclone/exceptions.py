"""Error taxonomy shared by services and routes.

Services raise these; the handlers registered in ``driveclone.main`` turn them
into ``{"success": false, "error": message}`` responses with ``status_code``.
"""


class DriveError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DriveError):
    """Malformed or missing input, or a folder that is not empty."""

    status_code = 400


class UnauthorizedError(DriveError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(DriveError):
    """Record is missing or owned by someone else. The two are never distinguished."""

    status_code = 404


class ConflictError(DriveError):
    status_code = 409


class InternalError(DriveError):
    """Unexpected store or blob host failure. The message is safe to show clients."""

    status_code = 500
