import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pwdlib import PasswordHash
from sqlalchemy import select

from config import settings
from database import sessionDep
from errors import AuthenticationError
from models.usermodel import UserModel

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    pass


class TokenExpiredError(InvalidTokenError):
    pass


class Authentication:

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_days: int | None = None,
    ) -> None:
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expires_in = timedelta(days=expire_days or settings.jwt_expire_days)

    def issue_token(self, user_id: int, email: str, expires_in: timedelta | None = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + (expires_in if expires_in is not None else self.expires_in),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        try:
            payload: dict = jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e

        try:
            payload["sub"] = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token subject is not a user id") from e
        return payload


authentication = Authentication()
hasher = PasswordHash.recommended()
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    session: sessionDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> UserModel:
    """Resolve the bearer token to an active user or reject with 401"""
    ip = request.client.host if request.client else None
    if credentials is None or not credentials.credentials:
        logger.warning("Access denied: no token provided ip=%s", ip)
        raise AuthenticationError("Access denied. No token provided.")

    try:
        payload = authentication.decode_token(credentials.credentials)
    except TokenExpiredError:
        logger.warning("Access denied: token expired ip=%s", ip)
        raise AuthenticationError("Token expired.")
    except InvalidTokenError as e:
        logger.warning("Access denied: invalid token ip=%s (%s)", ip, e)
        raise AuthenticationError("Invalid token.")

    uid = payload["sub"]
    result = await session.execute(select(UserModel).where(UserModel.id == uid))
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("Access denied: user not found user_id=%s", uid)
        raise AuthenticationError("Access denied. User not found.")

    if not user.is_active:
        logger.warning("Access denied: account inactive user_id=%s", uid)
        raise AuthenticationError("Access denied. Account is inactive.")

    request.state.user_id = user.id
    return user


currentUserDep = Annotated[UserModel, Depends(get_current_user)]
