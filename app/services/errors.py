"""Error taxonomy shared by the session, post and upload services.

Services raise these; app.main turns any ServiceError into a JSON body
{"error": message} so nothing escapes the request boundary.
"""


class ServiceError(Exception):
    """Base class; `status_code` is the HTTP status used at the API boundary."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentials(ServiceError):
    """Unknown username or wrong password (deliberately not distinguished)."""

    status_code = 401

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class AccessDenied(ServiceError):
    """No session, or the session lacks the needed role or ownership."""

    status_code = 403

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFound(ServiceError):
    """Requested row does not exist (or is not visible to the caller)."""

    status_code = 404


class ValidationError(ServiceError):
    """A required field is missing or a transition is not allowed from the current status."""

    status_code = 422


class PersistenceError(ServiceError):
    """The data store rejected the operation; message is the store's own."""

    status_code = 500


class UploadError(ServiceError):
    """No file supplied, unacceptable file, or the object store failed."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.status_code = status_code
        super().__init__(message)
