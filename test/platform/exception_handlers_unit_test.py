"""
Error body mapping

Every error leaves the service as {"detail": ..., "kind": ...} plus any
structured extras (e.g. seatIds on seat conflicts).
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.platform.database.storage_errors import is_storage_failure, to_storage_error
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import StorageUnavailableError
from src.service.cinema.domain.reservation_error import (
    PaymentInitFailedError,
    SeatUnavailableError,
)


class _Body(BaseModel):
    seat_ids: list[int]


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/conflict')
    async def conflict():
        raise SeatUnavailableError('Some selected seats are no longer available', seat_ids=[3, 1])

    @app.get('/upstream')
    async def upstream():
        raise PaymentInitFailedError('Could not create payment order: timeout')

    @app.get('/pool')
    async def pool():
        raise PoolTimeoutError('QueuePool limit reached')

    @app.get('/boom')
    async def boom():
        raise RuntimeError('secret internals')

    @app.post('/validate')
    async def validate(body: _Body):
        return body

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
class TestExceptionHandlers:
    def test_conflict_carries_kind_and_seat_ids(self, client: TestClient):
        response = client.get('/conflict')

        assert response.status_code == 409
        assert response.json() == {
            'detail': 'Some selected seats are no longer available',
            'kind': 'SeatUnavailable',
            'seatIds': [1, 3],
        }

    def test_upstream_failure_is_502(self, client: TestClient):
        response = client.get('/upstream')

        assert response.status_code == 502
        assert response.json()['kind'] == 'PaymentInitFailed'

    def test_pool_exhaustion_is_storage_unavailable(self, client: TestClient):
        response = client.get('/pool')

        assert response.status_code == 503
        assert response.json()['kind'] == 'StorageUnavailable'

    def test_unexpected_error_hides_internals(self, client: TestClient):
        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error', 'kind': 'InternalError'}

    def test_request_validation_is_400(self, client: TestClient):
        response = client.post('/validate', json={'seat_ids': 'not-a-list'})

        assert response.status_code == 400
        assert response.json()['kind'] == 'InvalidRequest'


@pytest.mark.unit
class TestStorageErrors:
    def test_operational_error_is_storage_failure(self):
        error = OperationalError('SELECT 1', {}, Exception('database is locked'))

        assert is_storage_failure(error)
        assert isinstance(to_storage_error(error), StorageUnavailableError)

    def test_plain_errors_are_not_storage_failures(self):
        assert to_storage_error(ValueError('bad')) is None

    def test_storage_error_passes_through(self):
        error = StorageUnavailableError()

        assert to_storage_error(error) is error
