"""
Stateless JWT authentication

The user id is the token's `sub` claim. Tokens are issued by the surrounding
account system; `create_jwt_token` exists for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError


AUTH_COOKIE_NAME = 'fastapiusersauth'


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_days = settings.ACCESS_TOKEN_EXPIRE_DAYS

    def create_jwt_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'iat': now,
            'exp': now + timedelta(days=self.token_expire_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    def get_user_id_from_jwt(self, token: Optional[str]) -> str:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('sub')
        if not user_id:
            raise AuthenticationError('Invalid token')
        return str(user_id)
