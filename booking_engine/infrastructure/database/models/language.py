"""
Language SQLAlchemy model.
"""

from sqlalchemy import Column, Integer, String

from .base import Base


class LanguageModel(Base):
    """Language lookup table."""

    __tablename__ = "languages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Language(id={self.id}, name={self.name})>"
