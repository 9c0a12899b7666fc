"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_id(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by an auth identity."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_ids(self, user_ids: list[UUID]) -> dict[UUID, Profile]:
        """Get profiles for several identities in a single query."""
        if not user_ids:
            return {}

        stmt = select(ProfileModel).where(ProfileModel.user_id.in_(user_ids))
        result = await self._session.execute(stmt)
        return {model.user_id: self._to_entity(model) for model in result.scalars()}

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile | None:
        """Update full_name and bio on the row matching user_id (no upsert)."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == profile.user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        model.full_name = profile.full_name
        model.bio = profile.bio
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            full_name=model.full_name,
            email=model.email,
            bio=model.bio,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            user_id=entity.user_id,
            full_name=entity.full_name,
            email=entity.email,
            bio=entity.bio,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
