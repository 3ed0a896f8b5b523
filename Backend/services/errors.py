"""
Domain errors raised by the service layer.

Routers let these propagate; ``main.py`` maps each one onto its HTTP status
with a ``{"detail": message}`` body, the same shape ``HTTPException`` uses.
"""


class ServiceError(Exception):
    status_code = 500
    default_message = "Service error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(ServiceError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Authentication failed"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamError(ServiceError):
    status_code = 502
    default_message = "Upstream service failed"
