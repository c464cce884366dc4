"""Blacklist repository implementation."""

from typing import FrozenSet
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.repositories import (
    BlacklistRepositoryInterface,
)
from booking_engine.infrastructure.database.models.blacklist import BlacklistModel


class BlacklistRepository(BlacklistRepositoryInterface):
    """Blacklist repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_blocked_translator_ids(self, customer_id: UUID) -> FrozenSet[UUID]:
        result = await self.session.execute(
            select(BlacklistModel.translator_id).where(
                BlacklistModel.customer_id == customer_id
            )
        )
        return frozenset(result.scalars().all())

    async def get_blocking_customer_ids(self, translator_id: UUID) -> FrozenSet[UUID]:
        result = await self.session.execute(
            select(BlacklistModel.customer_id).where(
                BlacklistModel.translator_id == translator_id
            )
        )
        return frozenset(result.scalars().all())

    async def add(self, customer_id: UUID, translator_id: UUID) -> None:
        """Block a translator for a customer."""
        self.session.add(
            BlacklistModel(customer_id=customer_id, translator_id=translator_id)
        )
        await self.session.flush()
