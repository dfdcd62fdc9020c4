from sqlalchemy import (
    Column, Integer, String, Date, Time, Float, DateTime, Enum, ForeignKey,
    CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from tablebook.db.session import Base
from tablebook.models.enums import BookingStatus, PaymentStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False)
    user_id = Column(String, nullable=False, index=True)

    # Slot key: calendar day + slot start
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)

    seats = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False, default=0.0)

    payment_status = Column(
        Enum(PaymentStatus, name="paymentstatus", values_callable=_enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    booking_status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=_enum_values),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )

    confirmation_code = Column(String(16), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, nullable=False)

    restaurant = relationship("Restaurant", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("seats >= 1", name="check_booking_seats_positive"),
        CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
        Index("ix_bookings_slot", "restaurant_id", "date", "time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, restaurant={self.restaurant_id}, "
            f"{self.date} {self.time}, seats={self.seats}, status={self.booking_status})>"
        )
