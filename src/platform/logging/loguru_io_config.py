"""
Loguru sinks for the cinema booking service

Every line carries `service@env:instance`, the `@Logger.io` call target and the
elapsed time since the outermost decorated call started. Standard `logging`
records (uvicorn / granian access lines, SQLAlchemy, httpx) are routed through
loguru with a level picked from the HTTP status where one is present.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings


# Argument / return values whose key contains one of these are masked
SENSITIVE_KEYWORDS = {
    'password',
    'signature',
    'secret',
    'token',
}

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def build_service_context() -> str:
    # Container hostname when orchestrated, PID locally
    instance_id = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())
    return f'{settings.SERVICE_NAME}@{settings.DEPLOY_ENV}:{instance_id}'


SERVICE_CONTEXT = build_service_context()
DEFAULT_EXTRA: dict[str, Any] = {
    ExtraField.SERVICE_CONTEXT: SERVICE_CONTEXT,
    ExtraField.CHAIN_START_TIME: '',
    ExtraField.CALL_TARGET: '',
}

# '127.0.0.1 - "POST /api/seats/hold HTTP/1.1" - 409 - 8ms'
_ACCESS_LINE = re.compile(r'"[A-Z]+ \S+ HTTP/[\d.]+" - (?P<status>\d{3})\b')

_STATUS_LEVELS = (
    (500, 'CRITICAL'),
    (400, 'ERROR'),
    (300, 'WARNING'),
    (200, 'SUCCESS'),
)


def level_for_access_line(message: str) -> str | None:
    match = _ACCESS_LINE.search(message)
    if match is None:
        return None
    status_code = int(match.group('status'))
    # Seat conflicts are everyday traffic for a booking service
    if status_code == 409:
        return 'INFO'
    return next((level for floor, level in _STATUS_LEVELS if status_code >= floor), 'INFO')


_NOISY_DEBUG_MESSAGES = ('Using selector:',)


class InterceptHandler(logging.Handler):
    """Forward standard logging records into loguru, keeping the original caller frame."""

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and message.startswith(_NOISY_DEBUG_MESSAGES):
            return

        level: str | int | None = level_for_access_line(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _log_file_path() -> str:
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    return str(settings.LOG_DIR / f'{settings.LOG_FILE_PREFIX}{hour}.log')


def configure_sinks(base_logger: 'LoguruLogger') -> None:
    min_level = 'DEBUG' if settings.DEBUG else 'INFO'
    base_logger.remove()
    base_logger.add(sys.stdout, format=io_log_format, level=min_level, enqueue=True)

    # Production ships stdout to the collector; files are a local debugging aid
    if settings.DEBUG:
        base_logger.add(
            _log_file_path(),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=min_level,
        )


configure_sinks(loguru_logger)
custom_logger = loguru_logger.bind(**DEFAULT_EXTRA)

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
