"""Bearer-token identity for API requests."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False, description="Supabase or locally issued JWT")


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    """Get the process-wide token validator."""
    return JWTAuthProvider()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Resolve the requesting identity from the Authorization header.

    The identity is bound into the structlog context so every later log
    line for the request carries ``user_id``.

    Raises:
        AuthenticationError: UNAUTHORIZED without a header,
            INVALID_TOKEN when the token does not validate
    """
    if credentials is None:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await auth_provider.validate_token(credentials.credentials)
    if user is None:
        logger.info("token_rejected")
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


# Identity only; routes use api.v1.dependencies.CurrentUser, which also provisions the profile
AuthenticatedUser = Annotated[TokenUser, Depends(get_current_user)]
