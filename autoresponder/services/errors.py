class ServiceError(Exception):
    """Base error raised by services; routers map ``status_code`` onto the HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    status_code = 400


class ConflictError(ServiceError):
    status_code = 400


class UnauthenticatedError(ServiceError):
    status_code = 401


class InvalidTokenError(UnauthenticatedError):
    """Credential was presented but failed verification (signature, expiry, claims)."""

    status_code = 403


class ForbiddenError(ServiceError):
    status_code = 403


class UnknownAccountError(ServiceError):
    status_code = 404


class CompletionError(ServiceError):
    status_code = 502
