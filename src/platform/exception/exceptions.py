from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io

    `kind` is the machine-readable error name returned to clients.
    `is_expected` marks outcomes that are part of normal traffic (seat conflicts),
    which are logged at INFO instead of ERROR.
    """

    kind: str = 'Error'
    is_expected: bool = False

    def __init__(self, message: str, status_code: int, **extra: Any) -> None:
        self.message = message
        self.status_code = status_code
        self.extra = extra
        super().__init__(message)


class DomainError(CustomBaseError):
    kind = 'DomainError'

    def __init__(self, message: str, status_code: int = 400, **extra: Any) -> None:
        super().__init__(message, status_code, **extra)


class ForbiddenError(CustomBaseError):
    kind = 'Forbidden'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    kind = 'NotFound'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    kind = 'Conflict'
    is_expected = True

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message, 409, **extra)


class AuthenticationError(CustomBaseError):
    kind = 'Unauthenticated'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class UpstreamError(CustomBaseError):
    """A dependency outside this service failed; safe for the client to retry."""

    kind = 'UpstreamError'

    def __init__(self, message: str, status_code: int = 503) -> None:
        super().__init__(message, status_code)


class StorageUnavailableError(UpstreamError):
    kind = 'StorageUnavailable'

    def __init__(self, message: str = 'Storage is temporarily unavailable') -> None:
        super().__init__(message, 503)
