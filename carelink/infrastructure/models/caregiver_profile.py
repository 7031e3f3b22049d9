"""SQLAlchemy model for caregiver profiles."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from carelink.infrastructure.database import Base
from carelink.utils import storage_now


class CaregiverProfileModel(Base):
    """Professional details of a caregiver, one per caregiver user."""

    __tablename__ = "caregiver_profile"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True
    )
    verified = Column(Boolean, nullable=False, default=False, index=True)
    hourly_rate_cents = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=storage_now)

    user = relationship("UserModel", lazy="joined")


__all__ = ["CaregiverProfileModel"]
