from sqlalchemy import Column, Integer, String, Float, Time, Text, CheckConstraint
from sqlalchemy.orm import relationship
from tablebook.db.session import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    cuisine = Column(String, nullable=False, default="")
    rating = Column(Float, nullable=True, default=0.0)
    address = Column(String, nullable=False, default="")
    phone = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    # Capacity and operating hours
    total_seats = Column(Integer, nullable=False)
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)

    # Pricing
    price_per_seat = Column(Float, nullable=False, default=0.0)

    # Bookings (One-to-Many)
    bookings = relationship("Booking", back_populates="restaurant")

    __table_args__ = (
        CheckConstraint("total_seats >= 1", name="check_restaurant_total_seats"),
        CheckConstraint("price_per_seat >= 0", name="check_restaurant_price_per_seat"),
        CheckConstraint("close_time > open_time", name="check_restaurant_hours"),
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name={self.name!r}, seats={self.total_seats})>"
