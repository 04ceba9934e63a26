#!/usr/bin/env python3
"""
API Server Launcher
Run the cinema booking API under granian

Equivalent to:
    granian src.main:app --interface asgi --host 0.0.0.0 --port 8100 --workers 1

Notes:
- API_HOST / API_PORT / API_WORKERS come from the environment or .env
- Each worker runs its own expiry sweeper; sweeps are idempotent deletes
"""

from granian import Granian
from granian.constants import Interfaces

from src.platform.config.core_setting import settings


def main() -> None:
    print(
        f'🚀 Serving {settings.PROJECT_NAME} on {settings.API_HOST}:{settings.API_PORT} '
        f'({settings.API_WORKERS} workers)'
    )
    Granian(
        'src.main:app',
        address=settings.API_HOST,
        port=settings.API_PORT,
        interface=Interfaces.ASGI,
        workers=settings.API_WORKERS,
    ).serve()


if __name__ == '__main__':
    main()
