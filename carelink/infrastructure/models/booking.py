"""SQLAlchemy model for bookings."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from carelink.infrastructure.database import Base
from carelink.utils import storage_now


class BookingModel(Base):
    """Database representation of a care booking."""

    __tablename__ = "booking"
    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_booking_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    caregiver_id = Column(
        Integer, ForeignKey("caregiver_profile.id"), nullable=True, index=True
    )
    start_time = Column(DateTime, nullable=False)
    address = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="requested", index=True)
    is_emergency = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=storage_now, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=storage_now)

    customer = relationship("UserModel", lazy="joined")
    caregiver = relationship("CaregiverProfileModel", lazy="joined")


__all__ = ["BookingModel"]
