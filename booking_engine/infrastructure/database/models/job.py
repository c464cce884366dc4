"""
Job SQLAlchemy model.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, Uuid

from .base import BaseModel, UTCDateTime


class JobModel(BaseModel):
    """Interpretation booking database model."""

    __tablename__ = "jobs"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    from_language_id = Column(Integer, ForeignKey("languages.id"), nullable=False, index=True)
    status = Column(String(30), nullable=False, default="pending", index=True)

    # Scheduling
    immediate = Column(Boolean, nullable=False, default=False)
    due = Column(UTCDateTime, index=True)
    duration = Column(Integer, nullable=False)
    will_expire_at = Column(UTCDateTime, index=True)
    end_at = Column(UTCDateTime)
    withdraw_at = Column(UTCDateTime)
    session_time = Column(String(20))

    # Requirements
    gender = Column(String(10))
    certified = Column(String(20), nullable=False, default="none")
    customer_phone_type = Column(Boolean, nullable=False, default=False)
    customer_physical_type = Column(Boolean, nullable=False, default=False)
    town = Column(String(100))
    job_type = Column(String(20), nullable=False, default="unpaid")

    # Administration
    admin_comments = Column(Text)
    flagged = Column(Boolean, nullable=False, default=False)
    manually_handled = Column(Boolean, nullable=False, default=False)
    by_admin = Column(Boolean, nullable=False, default=False)
    user_email = Column(String(255))
    reference = Column(String(255))
    reopened_from_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), index=True)

    # Customer reminder bookkeeping
    email_sent = Column(Boolean, nullable=False, default=False)
    cust_16_hour_email = Column(Boolean, nullable=False, default=False)
    cust_48_hour_email = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, status={self.status}, due={self.due})>"
