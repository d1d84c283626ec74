"""Application errors with an HTTP status attached.

Services raise these; the API layer renders them as
``{"status": ..., "message": ..., "meta": ...}``.
"""


class AppError(Exception):
    """Base error carrying an HTTP status, a message and optional metadata."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, meta: object | None = None) -> None:
        self.message = message or self.default_message
        self.meta = meta
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON error envelope."""
        return {"status": self.status_code, "message": self.message, "meta": self.meta}


class BadRequestError(AppError):
    """Structurally invalid input."""

    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "You don't have permission to access this resource"


class NotFoundError(AppError):
    """Referenced resource(s) do not exist."""

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        meta: object | None = None,
        *,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"{resource} not found", meta)


class UnprocessableEntityError(AppError):
    """Valid input that violates a domain rule."""

    status_code = 422
    default_message = "Validation failed"


class TooManyRequestsError(AppError):
    status_code = 429
    default_message = "Too many requests, please try again later."


class ServiceUnavailableError(AppError):
    status_code = 503
    default_message = "Service unavailable"


class StorageCleanupError(AppError):
    """The catalog change committed but some storage objects were not removed.

    Callers must treat the resources as deleted; ``failed_keys`` lists the
    objects left behind in storage.
    """

    status_code = 500

    def __init__(self, message: str, failed_keys: list[str]) -> None:
        self.failed_keys = list(failed_keys)
        super().__init__(message, {"failedKeys": self.failed_keys})
