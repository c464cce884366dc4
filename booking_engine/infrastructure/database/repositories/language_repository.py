"""Language repository implementation."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.repositories import (
    LanguageRepositoryInterface,
)
from booking_engine.infrastructure.database.models.language import LanguageModel


class LanguageRepository(LanguageRepositoryInterface):
    """Language repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_name(self, language_id: int) -> Optional[str]:
        """Get the display name of a language."""
        result = await self.session.execute(
            select(LanguageModel.name).where(LanguageModel.id == language_id)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str) -> int:
        """Register a language and return its id."""
        model = LanguageModel(name=name)
        self.session.add(model)
        await self.session.flush()
        return model.id
