"""
Translator assignment SQLAlchemy model.
"""

from sqlalchemy import Column, ForeignKey, Uuid

from .base import BaseModel, UTCDateTime


class AssignmentModel(BaseModel):
    """Append-only translator/job binding rows."""

    __tablename__ = "translator_assignments"

    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    translator_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    cancel_at = Column(UTCDateTime)
    completed_at = Column(UTCDateTime)
    completed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"))

    def __repr__(self) -> str:
        return (
            f"<Assignment(id={self.id}, job_id={self.job_id}, "
            f"translator_id={self.translator_id})>"
        )
