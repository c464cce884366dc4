"""User repository implementation."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.repositories import (
    TranslatorCriteria,
    UserRepositoryInterface,
)
from booking_engine.domain.entities.user import NotificationPreferences, User
from booking_engine.domain.value_objects.job_attributes import Gender
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)
from booking_engine.domain.value_objects.user_role import UserRole, UserStatus
from booking_engine.infrastructure.database.models.user import (
    UserLanguageModel,
    UserModel,
)


class UserRepository(UserRepositoryInterface):
    """User repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by e-mail address."""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def create(self, user: User) -> User:
        """Create a new user with their language list."""
        model = UserModel(
            id=user.id,
            role=user.role.value,
            status=user.status.value,
            name=user.name,
            email=user.email,
            mobile=user.mobile,
            town=user.town,
            translator_type=user.translator_type.value if user.translator_type else None,
            translator_level=user.translator_level.value if user.translator_level else None,
            gender=user.gender.value if user.gender else None,
            consumer_type=user.consumer_type,
            customer_type=user.customer_type,
            not_get_notification=user.preferences.not_get_notification,
            not_get_nighttime=user.preferences.not_get_nighttime,
            not_get_emergency=user.preferences.not_get_emergency,
            languages=[
                UserLanguageModel(language_id=language_id)
                for language_id in sorted(user.language_ids)
            ],
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    async def find_translators(self, criteria: TranslatorCriteria) -> List[User]:
        """List translators matching the coarse criteria."""
        stmt = select(UserModel).where(UserModel.role == UserRole.TRANSLATOR.value)

        if criteria.active_only:
            stmt = stmt.where(UserModel.status == UserStatus.ACTIVE.value)
        if criteria.translator_type:
            stmt = stmt.where(UserModel.translator_type == criteria.translator_type.value)
        if criteria.gender:
            stmt = stmt.where(UserModel.gender == criteria.gender.value)
        if criteria.levels is not None:
            stmt = stmt.where(
                UserModel.translator_level.in_([level.value for level in criteria.levels])
            )
        if criteria.language_id is not None:
            stmt = stmt.join(
                UserLanguageModel, UserLanguageModel.user_id == UserModel.id
            ).where(UserLanguageModel.language_id == criteria.language_id)

        result = await self.session.execute(stmt.order_by(UserModel.created_at.asc()))
        return [self._model_to_entity(model) for model in result.scalars().unique().all()]

    def _model_to_entity(self, model: UserModel) -> User:
        """Convert SQLAlchemy model to domain entity."""
        return User(
            id=model.id,
            role=UserRole(model.role),
            status=UserStatus(model.status),
            name=model.name or "",
            email=model.email,
            mobile=model.mobile,
            town=model.town,
            translator_type=(
                TranslatorType(model.translator_type) if model.translator_type else None
            ),
            translator_level=(
                TranslatorLevel(model.translator_level) if model.translator_level else None
            ),
            gender=Gender(model.gender) if model.gender else None,
            consumer_type=model.consumer_type,
            customer_type=model.customer_type,
            language_ids=frozenset(link.language_id for link in model.languages),
            preferences=NotificationPreferences(
                not_get_notification=model.not_get_notification,
                not_get_nighttime=model.not_get_nighttime,
                not_get_emergency=model.not_get_emergency,
            ),
        )
