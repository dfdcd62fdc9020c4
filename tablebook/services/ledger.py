"""Reservation ledger: availability and booking commits.

The ledger is the only component allowed to answer "is there room" and to
commit a reservation. Capacity is derived on read from the bookings in its
store, never stored.
"""
from dataclasses import dataclass
from datetime import datetime, time

from tablebook.core.config import config
from tablebook.core.errors import (
    BookingError, DuplicateConfirmationCode, InvalidInput, InvalidSlot, NotFound,
)
from tablebook.core.logging_config import get_logger
from tablebook.models.booking import Booking
from tablebook.models.enums import BookingStatus, PaymentStatus
from tablebook.services.store import InMemoryBookingStore
from tablebook.utils.confirmation import generate_confirmation_code
from tablebook.utils.slots import format_time, hourly_slots, parse_date, parse_time

logger = get_logger()


@dataclass(frozen=True)
class TimeSlot:
    time: time
    available_seats: int
    is_available: bool

    def to_dict(self) -> dict:
        return {
            "time": format_time(self.time),
            "available_seats": self.available_seats,
            "is_available": self.is_available,
        }


class ReservationLedger:

    def __init__(self, catalog, store=None, strict_lookup: bool = False,
                 code_generator=generate_confirmation_code):
        self.catalog = catalog
        self.store = store if store is not None else InMemoryBookingStore()
        self.strict_lookup = strict_lookup
        self._generate_code = code_generator

    # -----------------------------------------------------------------
    # LOOKUPS
    # -----------------------------------------------------------------
    def _require_restaurant(self, restaurant_id):
        restaurant = self.catalog.get_restaurant_by_id(restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {restaurant_id} not found")
        return restaurant

    def _require_booking(self, booking_id) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")
        return booking

    # -----------------------------------------------------------------
    # AVAILABILITY
    # -----------------------------------------------------------------
    def get_available_slots(self, restaurant_id, day) -> list[TimeSlot]:
        """One entry per hourly slot, with the seats still free in it.

        Unknown restaurants give an empty list unless the ledger was built
        with ``strict_lookup``, in which case ``NotFound`` is raised.
        """
        day = parse_date(day)
        restaurant = self.catalog.get_restaurant_by_id(restaurant_id)
        if restaurant is None:
            if self.strict_lookup:
                raise NotFound(f"Restaurant {restaurant_id} not found")
            return []

        booked = self.store.booked_seats(restaurant.id, day)

        slots = []
        for start in hourly_slots(restaurant.open_time, restaurant.close_time):
            available = max(0, restaurant.total_seats - booked.get(start, 0))
            slots.append(TimeSlot(time=start, available_seats=available, is_available=available > 0))
        return slots

    # -----------------------------------------------------------------
    # COMMIT
    # -----------------------------------------------------------------
    def commit_booking(self, restaurant_id, day, slot_time, seats, user_id,
                       payment_status=PaymentStatus.PENDING, amount=0.0) -> Booking:
        if isinstance(seats, bool) or not isinstance(seats, int) or seats < 1:
            raise InvalidInput(f"Seats must be a positive integer, got {seats!r}")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount < 0:
            raise InvalidInput(f"Amount must be non-negative, got {amount!r}")
        if not user_id:
            raise InvalidInput("user_id is required")
        try:
            payment_status = PaymentStatus(payment_status)
        except ValueError:
            raise InvalidInput(f"Unknown payment status '{payment_status}'")

        day = parse_date(day)
        slot_time = parse_time(slot_time)
        restaurant = self._require_restaurant(restaurant_id)

        if slot_time not in hourly_slots(restaurant.open_time, restaurant.close_time):
            raise InvalidSlot(
                f"{format_time(slot_time)} is not a bookable slot at {restaurant.name} "
                f"(open {format_time(restaurant.open_time)}-{format_time(restaurant.close_time)})"
            )

        for _ in range(config.CONFIRMATION_MAX_ATTEMPTS):
            code = self._generate_code()
            if self.store.code_exists(code):
                continue

            booking = Booking(
                restaurant_id=restaurant.id,
                user_id=user_id,
                date=day,
                time=slot_time,
                seats=seats,
                total_amount=float(amount),
                payment_status=payment_status,
                booking_status=BookingStatus.CONFIRMED,
                confirmation_code=code,
                created_at=datetime.now(),
            )
            try:
                booking = self.store.insert_if_room(booking, restaurant.total_seats)
            except DuplicateConfirmationCode:
                continue

            logger.bind(log_type="booking").info(
                f"Booking Created | Code={booking.confirmation_code} | User={user_id} | "
                f"Restaurant={restaurant.id} | Slot={day.isoformat()} {format_time(slot_time)} | Seats={seats}"
            )
            return booking

        raise BookingError("Could not allocate a unique confirmation code")

    # -----------------------------------------------------------------
    # STATUS CHANGES
    # -----------------------------------------------------------------
    def cancel_booking(self, booking_id) -> Booking:
        booking = self.store.transition(booking_id, BookingStatus.CANCELLED)
        logger.bind(log_type="booking").info(
            f"Booking Cancelled | Id={booking.id} | Code={booking.confirmation_code}"
        )
        return booking

    def complete_booking(self, booking_id) -> Booking:
        booking = self.store.transition(booking_id, BookingStatus.COMPLETED)
        logger.bind(log_type="booking").info(
            f"Booking Completed | Id={booking.id} | Code={booking.confirmation_code}"
        )
        return booking

    # -----------------------------------------------------------------
    # QUERIES
    # -----------------------------------------------------------------
    def list_bookings_for_user(self, user_id) -> list[Booking]:
        return self.store.list_for_user(user_id)

    def get_booking(self, booking_id) -> Booking:
        return self._require_booking(booking_id)

    def get_booking_by_code(self, confirmation_code: str) -> Booking:
        booking = self.store.get_by_code((confirmation_code or "").strip().upper())
        if booking is None:
            raise NotFound(f"No booking with confirmation code '{confirmation_code}'")
        return booking
