from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header

from src.platform.config.di import Container
from src.service.cinema.driving_adapter.http_controller.auth.jwt_auth import (
    AUTH_COOKIE_NAME,
    JwtAuth,
)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not credentials:
        return None
    return credentials.strip()


@inject
async def get_current_user_id(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> str:
    """Cookie first, then `Authorization: Bearer`. No DB lookup."""
    return jwt_auth.get_user_id_from_jwt(token or _bearer_token(authorization))


@inject
async def get_optional_user_id(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    """Anonymous seat-map reads are allowed; a bad token is still rejected."""
    raw = token or _bearer_token(authorization)
    if raw is None:
        return None
    return jwt_auth.get_user_id_from_jwt(raw)
