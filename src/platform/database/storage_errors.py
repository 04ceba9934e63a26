"""
Storage failure classification

Maps driver/pool failures (pool exhaustion, dropped connections, statement or
lock timeouts) to StorageUnavailableError so callers get a retryable 503
instead of a generic 500. Constraint violations are NOT storage failures:
repositories translate IntegrityError into domain conflicts themselves.
"""

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.platform.exception.exceptions import StorageUnavailableError


# asyncpg / sqlite exception class names raised when a statement is cut short
_TIMEOUT_ERROR_NAMES = frozenset(
    {
        'QueryCanceledError',
        'LockNotAvailableError',
        'DeadlockDetectedError',
        'ConnectionDoesNotExistError',
    }
)


def is_storage_failure(exc: BaseException) -> bool:
    if isinstance(exc, (PoolTimeoutError, OperationalError, InterfaceError, TimeoutError)):
        return True
    if isinstance(exc, DBAPIError):
        if exc.connection_invalidated:
            return True
        return type(exc.orig).__name__ in _TIMEOUT_ERROR_NAMES
    return False


def to_storage_error(exc: BaseException) -> StorageUnavailableError | None:
    if isinstance(exc, StorageUnavailableError):
        return exc
    if not is_storage_failure(exc):
        return None
    return StorageUnavailableError(f'Storage is temporarily unavailable: {type(exc).__name__}')
