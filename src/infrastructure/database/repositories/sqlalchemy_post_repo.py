"""SQLAlchemy implementation of Post repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.post import Post
from infrastructure.database.models import PostModel


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, post: Post) -> Post:
        """Insert a post; the author FK is checked by the database on flush."""
        model = self._to_model(post)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_all(self) -> list[Post]:
        """Get every post, newest first."""
        stmt = select(PostModel).order_by(PostModel.created_at.desc(), PostModel.id.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_all_for_user(self, user_id: UUID) -> list[Post]:
        """Get every post by one author, newest first."""
        stmt = (
            select(PostModel)
            .where(PostModel.user_id == user_id)
            .order_by(PostModel.created_at.desc(), PostModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: PostModel) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            user_id=model.user_id,
            content=model.content,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Post) -> PostModel:
        """Convert domain entity to ORM model."""
        return PostModel(
            id=entity.id,
            user_id=entity.user_id,
            content=entity.content,
            created_at=entity.created_at,
        )
