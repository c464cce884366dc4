"""
Unit of work over one SQLAlchemy session.
"""

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.services import TransactionInterface
from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import BookingError

logger = get_logger(__name__)

T = TypeVar("T")


class TransactionService(TransactionInterface):
    """Commits a use case's writes together or not at all."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def execute_in_transaction(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``operation`` and commit its writes.

        Any exception rolls the session back and is re-raised. Business
        rejections (a lost status race, a double booking) are expected
        outcomes and only logged at info level.
        """
        try:
            result = await operation()
            await self.session.commit()
        except BookingError as e:
            await self.session.rollback()
            logger.info("Booking change rejected, rolled back", error=str(e))
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Transaction rolled back",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        logger.debug("Transaction committed")
        return result

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
