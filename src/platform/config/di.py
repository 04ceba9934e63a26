"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import get_unit_of_work
from src.service.cinema.app.clock import utc_now
from src.service.cinema.driven_adapter.payment.razorpay_gateway_impl import RazorpayGatewayImpl
from src.service.cinema.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.cinema.driven_adapter.repo.seat_inventory_query_repo_impl import (
    SeatInventoryQueryRepoImpl,
)
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def build_payment_gateway(config: Settings) -> RazorpayGatewayImpl:
    return RazorpayGatewayImpl(
        key_id=config.RAZORPAY_KEY_ID,
        key_secret=config.RAZORPAY_KEY_SECRET.get_secret_value(),
        base_url=config.RAZORPAY_BASE_URL,
        timeout=config.PAYMENT_GATEWAY_TIMEOUT,
    )


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Read replica sessions for the query repositories (primary when no replica is set)
    read_database = providers.Singleton(Database, read_only=True)

    # Each call gets a fresh UoW (session opened on `async with`)
    unit_of_work = providers.Factory(get_unit_of_work)

    # Server clock, overridden in tests to move time
    clock = providers.Object(utc_now)

    # Read-side repositories (stateless - use session_factory per-call)
    seat_inventory_query_repo = providers.Singleton(
        SeatInventoryQueryRepoImpl, session_factory=read_database.provided.session
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=read_database.provided.session
    )

    # External services
    payment_gateway = providers.Singleton(build_payment_gateway, config=config_service)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
