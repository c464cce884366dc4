"""
User SQLAlchemy models.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from .base import Base, BaseModel


class UserModel(BaseModel):
    """Customer, translator and administrator accounts."""

    __tablename__ = "users"

    role = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), unique=True, index=True)
    mobile = Column(String(30))
    town = Column(String(100))

    # Translator profile
    translator_type = Column(String(30), index=True)
    translator_level = Column(String(100))
    gender = Column(String(10))

    # Customer profile
    consumer_type = Column(String(30))
    customer_type = Column(String(30))

    # Push opt-outs
    not_get_notification = Column(Boolean, nullable=False, default=False)
    not_get_nighttime = Column(Boolean, nullable=False, default=False)
    not_get_emergency = Column(Boolean, nullable=False, default=False)

    languages = relationship(
        "UserLanguageModel",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role}, email={self.email})>"


class UserLanguageModel(Base):
    """Languages a translator works with."""

    __tablename__ = "user_languages"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    language_id = Column(
        Integer, ForeignKey("languages.id"), primary_key=True, index=True
    )

    user = relationship("UserModel", back_populates="languages")
