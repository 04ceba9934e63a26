from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Cinema Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # ASGI server (granian)
    API_HOST: str = '0.0.0.0'
    API_PORT: int = 8100
    API_WORKERS: int = 1

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7
    ALGORITHM: str = 'HS256'

    # Logging
    SERVICE_NAME: str = 'cinema-booking'
    DEPLOY_ENV: str = 'local_dev'
    LOG_DIR: Path = _PROJECT_ROOT / 'logs'
    LOG_FILE_PREFIX: str = ''

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'cinema_booking'
    POSTGRES_REPLICA_SERVER: Optional[str] = None
    POSTGRES_REPLICA_PORT: Optional[int] = None

    # Full URL override (tests point this at sqlite+aiosqlite)
    DATABASE_URL: Optional[str] = None

    # Connection pool
    DB_POOL_SIZE_WRITE: int = 10
    DB_POOL_SIZE_READ: int = 20
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: float = 5.0  # Seconds to wait for a pooled connection
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    # Per-statement bounds (PostgreSQL only)
    DB_COMMAND_TIMEOUT: float = 10.0
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_LOCK_TIMEOUT_MS: int = 3000

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self._build_postgres_url(server=self.POSTGRES_SERVER, port=self.POSTGRES_PORT)

    @property
    def DATABASE_READ_URL_ASYNC(self) -> str:
        if self.DATABASE_URL or not self.POSTGRES_REPLICA_SERVER:
            return self.DATABASE_URL_ASYNC
        return self._build_postgres_url(
            server=self.POSTGRES_REPLICA_SERVER,
            port=self.POSTGRES_REPLICA_PORT or self.POSTGRES_PORT,
        )

    def _build_postgres_url(self, *, server: str, port: int) -> str:
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}@{server}:{port}/{self.POSTGRES_DB}'
        )

    # Seat holds
    HOLD_TTL_SECONDS: int = 600
    MAX_SEATS_PER_HOLD: int = 8
    SWEEP_INTERVAL_SECONDS: float = 60.0
    SWEEP_ON_READ: bool = True  # Lazy expiry sweep before availability reads and hold requests

    # Bookings
    BOOKING_FEE: Decimal = Decimal('2.50')
    BOOKING_REFERENCE_PREFIX: str = 'SN'
    VALIDATE_TOTAL_AMOUNT: bool = True
    PENDING_BOOKING_TTL_SECONDS: int = 1800

    # Payment gateway (Razorpay-compatible)
    PAYMENT_CURRENCY: str = 'INR'
    RAZORPAY_KEY_ID: str = ''
    RAZORPAY_KEY_SECRET: SecretStr = SecretStr('')
    RAZORPAY_BASE_URL: str = 'https://api.razorpay.com/v1'
    PAYMENT_GATEWAY_TIMEOUT: float = 10.0


settings = Settings()  # type: ignore
