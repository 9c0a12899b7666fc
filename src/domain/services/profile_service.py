"""Profile service layer: lookup, provisioning and owner-only edits."""

from collections import OrderedDict
from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.exceptions import (
    AuthenticationError,
    ConstraintViolationError,
    ProfileNotFoundError,
    QueryFailedError,
)
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.validation import clean_bio, clean_full_name

logger = structlog.get_logger()

# Identities remembered as provisioned; the oldest are forgotten first
PROVISIONED_CACHE_SIZE = 10_000


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        provisioned_cache_size: int = PROVISIONED_CACHE_SIZE,
    ) -> None:
        self._uow_factory = uow_factory
        self._provisioned_cache_size = provisioned_cache_size
        self._provisioned_users: OrderedDict[UUID, None] = OrderedDict()

    def _is_provisioned(self, user_id: UUID) -> bool:
        if user_id not in self._provisioned_users:
            return False
        self._provisioned_users.move_to_end(user_id)
        return True

    def _mark_provisioned(self, user_id: UUID) -> None:
        self._provisioned_users[user_id] = None
        self._provisioned_users.move_to_end(user_id)
        while len(self._provisioned_users) > self._provisioned_cache_size:
            self._provisioned_users.popitem(last=False)

    async def get_by_user_id(self, user_id: UUID) -> Profile:
        """Get a profile by its owner's identity."""
        async with self._uow_factory() as uow:
            try:
                profile = await uow.profiles.get_by_user_id(user_id)
            except SQLAlchemyError as exc:
                logger.error("profile_query_failed", user_id=str(user_id), error=str(exc))
                raise QueryFailedError("profile") from exc

            if not profile:
                raise ProfileNotFoundError(str(user_id))
            return profile

    async def update(
        self,
        requester_id: UUID | None,
        full_name: str,
        bio: str | None = None,
    ) -> Profile:
        """Replace the requester's full name and bio.

        The target row is always the requester's own; no caller-supplied
        id is accepted. Concurrent edits of the same profile are
        last-write-wins.
        """
        if requester_id is None:
            raise AuthenticationError()

        cleaned_name = clean_full_name(full_name)
        cleaned_bio = clean_bio(bio)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_user_id(requester_id)
            if not profile:
                raise ProfileNotFoundError(str(requester_id))

            profile.apply_edit(cleaned_name, cleaned_bio)

            try:
                updated = await uow.profiles.update(profile)
                if not updated:
                    raise ProfileNotFoundError(str(requester_id))
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                raise ConstraintViolationError("Profile update was rejected") from exc

        logger.info("profile_updated", user_id=str(requester_id))
        return updated

    async def ensure_profile(
        self,
        user_id: UUID,
        email: str,
        display_name: str | None = None,
    ) -> Profile | None:
        """Create the identity's profile on first sight.

        Idempotent: returns None if the profile already exists. A unique
        violation from a concurrent request counts as already provisioned.

        Raises:
            QueryFailedError: the store could not be read or written
        """
        if self._is_provisioned(user_id):
            return None

        async with self._uow_factory() as uow:
            try:
                existing = await uow.profiles.get_by_user_id(user_id)
            except SQLAlchemyError as exc:
                logger.error("profile_query_failed", user_id=str(user_id), error=str(exc))
                raise QueryFailedError("profile") from exc
            if existing:
                self._mark_provisioned(user_id)
                return None

            full_name = (display_name or "").strip() or email.split("@")[0] or "New user"
            profile = Profile(user_id=user_id, full_name=full_name, email=email)

            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # Only unique violations mean another request won the race.
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    self._mark_provisioned(user_id)
                    logger.debug("profile_already_provisioned", user_id=str(user_id))
                    return None
                raise
            except SQLAlchemyError as exc:
                await uow.rollback()
                logger.error("profile_provisioning_failed", user_id=str(user_id), error=str(exc))
                raise QueryFailedError("profile") from exc

            self._mark_provisioned(user_id)
            logger.info("profile_provisioned", user_id=str(user_id))
            return created
