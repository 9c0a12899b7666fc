"""HTTP gateway the client reconciliation layer talks through.

Error envelopes returned by the API are turned back into the same
``AppException`` subclasses the services raise, so client state code
handles local and remote failures with one set of ``except`` clauses.
"""

from typing import Any, Protocol
from uuid import UUID

import httpx
import structlog

from api.v1.schemas.feed import FeedEntryResponse, FeedListResponse
from api.v1.schemas.post import PostDetailResponse, PostResponse
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse
from core.config import settings
from core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConstraintViolationError,
    ErrorCode,
    NetworkError,
    ProfileNotFoundError,
    QueryFailedError,
    ValidationFailedError,
)

logger = structlog.get_logger()


class IFeedGateway(Protocol):
    """Operations the client state objects need from the server."""

    async def create_post(self, content: str) -> PostResponse:
        ...

    async def get_global_feed(self) -> list[FeedEntryResponse]:
        ...

    async def get_user_feed(self, user_id: UUID) -> list[FeedEntryResponse]:
        ...

    async def get_profile(self, user_id: UUID | None = None) -> ProfileResponse:
        ...

    async def update_profile(self, full_name: str, bio: str | None) -> ProfileResponse:
        ...


class FeedApiClient:
    """httpx-backed implementation of IFeedGateway."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = settings.api_base_url,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = settings.api_timeout_seconds,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/api/v1",
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "FeedApiClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_post(self, content: str) -> PostResponse:
        body = await self._request("POST", "/posts", json={"content": content})
        return PostDetailResponse.model_validate(body).data

    async def get_global_feed(self) -> list[FeedEntryResponse]:
        body = await self._request("GET", "/feed")
        return FeedListResponse.model_validate(body).data

    async def get_user_feed(self, user_id: UUID) -> list[FeedEntryResponse]:
        body = await self._request("GET", f"/profiles/{user_id}/posts")
        return FeedListResponse.model_validate(body).data

    async def get_profile(self, user_id: UUID | None = None) -> ProfileResponse:
        """Fetch a profile; without a user id, the caller's own."""
        path = "/profiles/me" if user_id is None else f"/profiles/{user_id}"
        body = await self._request("GET", path)
        return ProfileDetailResponse.model_validate(body).data

    async def update_profile(self, full_name: str, bio: str | None) -> ProfileResponse:
        body = await self._request(
            "PATCH", "/profiles/me", json={"full_name": full_name, "bio": bio}
        )
        return ProfileDetailResponse.model_validate(body).data

    async def _request(self, method: str, path: str, json: Any | None = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as exc:
            logger.warning("api_unreachable", method=method, path=path, error=str(exc))
            raise NetworkError(f"Could not reach the server: {exc}") from exc

        if response.is_success:
            return response.json()
        raise error_from_response(response)


def error_from_response(response: httpx.Response) -> AppException:
    """Rebuild the domain exception described by an API error envelope."""
    try:
        payload = response.json()
    except ValueError:
        return AppException(ErrorCode.INTERNAL_ERROR, response.text, response.status_code)

    if not isinstance(payload, dict):
        return AppException(ErrorCode.INTERNAL_ERROR, str(payload), response.status_code)

    code = payload.get("error_code", "")
    message = payload.get("message") or response.reason_phrase
    details = payload.get("details")

    if code in (ErrorCode.UNAUTHORIZED, ErrorCode.INVALID_TOKEN, ErrorCode.TOKEN_EXPIRED):
        return AuthenticationError(message, ErrorCode(code))
    if code == ErrorCode.FORBIDDEN:
        return AuthorizationError(message)
    if code == ErrorCode.VALIDATION_ERROR:
        return ValidationFailedError(_invalid_field(details), message)
    if code == ErrorCode.PROFILE_NOT_FOUND:
        return ProfileNotFoundError(str((details or {}).get("user_id", "")))
    if code == ErrorCode.CONSTRAINT_VIOLATION:
        return ConstraintViolationError(message)
    if code == ErrorCode.QUERY_FAILED:
        return QueryFailedError(str((details or {}).get("query", "")))

    try:
        error_code = ErrorCode(code)
    except ValueError:
        error_code = ErrorCode.INTERNAL_ERROR
    return AppException(error_code, message, response.status_code, details)


def _invalid_field(details: Any) -> str:
    # Service errors carry {"field": ...}; schema errors carry a list of them.
    if isinstance(details, dict):
        return str(details.get("field", ""))
    if isinstance(details, list) and details and isinstance(details[0], dict):
        return str(details[0].get("field", "")).rsplit(".", 1)[-1]
    return ""
