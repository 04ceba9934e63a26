"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite database per xdist worker (aiosqlite)
- Schema reset and seed data for integration tests
- A controllable clock and a stub payment gateway

Architecture:
- Unit tests (test/**/unit/): stub the Unit of Work and gateway, never touch the DB
- Integration tests: real repositories on SQLite, or the HTTP app through TestClient
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings is instantiated at import time, so DATABASE_URL must be set first
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_dir = Path(tempfile.gettempdir()) / 'cinema_booking_test'
    db_dir.mkdir(exist_ok=True)
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / f"test_{worker_id}.db"}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['LOG_DIR'] = str(test_log_dir)
    os.environ['LOG_FILE_PREFIX'] = 'test_'

    os.environ['SECRET_KEY'] = 'test_secret_key'
    os.environ['RAZORPAY_KEY_ID'] = 'rzp_test_key'
    os.environ['RAZORPAY_KEY_SECRET'] = 'rzp_test_secret'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402

from src.platform.database.orm_db_setting import dispose_engines, get_session_maker  # noqa: E402
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
import src.service.cinema.driven_adapter.model  # noqa: E402, F401
from test.service.cinema.cinema_test_constants import BASE_TIME  # noqa: E402
from test.service.cinema.cinema_test_double import (  # noqa: E402
    FakeClock,
    StubPaymentGateway,
)
from test.service.cinema.seed import reset_schema, seed_cinema  # noqa: E402


# =============================================================================
# Database Fixtures
# =============================================================================
@pytest.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh schema for one test; engines are disposed because every test has its own loop"""
    await reset_schema()
    yield
    await dispose_engines()


@pytest.fixture
async def seeded_db(database: None) -> None:
    await seed_cinema(get_session_maker())


@pytest.fixture
def uow() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork()


# =============================================================================
# Collaborator Fixtures
# =============================================================================
@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(BASE_TIME)


@pytest.fixture
def payment_gateway() -> StubPaymentGateway:
    return StubPaymentGateway()
