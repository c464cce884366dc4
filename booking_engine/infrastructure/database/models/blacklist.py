"""
Customer blacklist SQLAlchemy model.
"""

from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid

from .base import BaseModel


class BlacklistModel(BaseModel):
    """Translators a customer has excluded."""

    __tablename__ = "user_blacklists"
    __table_args__ = (
        UniqueConstraint("customer_id", "translator_id", name="uq_blacklist_pair"),
    )

    customer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    translator_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
