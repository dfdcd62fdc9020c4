from dataclasses import dataclass
from datetime import date
from typing import Optional

from tablebook.core.errors import InvalidInput, NotFound
from tablebook.models.booking import Booking
from tablebook.models.enums import PaymentStatus
from tablebook.models.restaurant import Restaurant
from tablebook.utils.pricing import calculate_booking_amount
from tablebook.utils.slots import format_time, parse_date, parse_time


@dataclass
class BookingConfirmation:
    booking: Booking
    restaurant: Restaurant
    notified: bool = False
    notification_error: Optional[str] = None


class BookingSession:
    """The reservation a diner is putting together.

    Holds the selected restaurant, date, time and party size and hands the
    commit to the ledger. ``notifier`` is called with the confirmation
    details after a successful commit when an email address is given.
    """

    def __init__(self, ledger, catalog, notifier=None):
        self.ledger = ledger
        self.catalog = catalog
        self.notifier = notifier

        self.restaurant: Optional[Restaurant] = None
        self.date: date = date.today()
        self.time = None
        self.seats: int = 2

    def select_restaurant(self, restaurant_id) -> Restaurant:
        restaurant = self.catalog.get_restaurant_by_id(restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {restaurant_id} not found")
        self.restaurant = restaurant
        return restaurant

    def select_date(self, day):
        self.date = parse_date(day)

    def select_time(self, slot_time):
        self.time = parse_time(slot_time)

    def select_seats(self, seats: int):
        if isinstance(seats, bool) or not isinstance(seats, int) or seats < 1:
            raise InvalidInput(f"Seats must be a positive integer, got {seats!r}")
        self.seats = seats

    def available_slots(self):
        if self.restaurant is None:
            return []
        return self.ledger.get_available_slots(self.restaurant.id, self.date)

    @property
    def total_amount(self) -> float:
        if self.restaurant is None:
            return 0.0
        return calculate_booking_amount(self.restaurant, self.seats)

    def confirm(self, user_id, payment_status=PaymentStatus.SKIPPED,
                notify_email: str = None, user_name: str = None) -> BookingConfirmation:
        if self.restaurant is None:
            raise InvalidInput("Select a restaurant before confirming")
        if self.time is None:
            raise InvalidInput("Select a time slot before confirming")

        booking = self.ledger.commit_booking(
            self.restaurant.id,
            self.date,
            self.time,
            self.seats,
            user_id,
            payment_status,
            self.total_amount,
        )
        confirmation = BookingConfirmation(booking=booking, restaurant=self.restaurant)
        self.notify(confirmation, notify_email, user_name)
        return confirmation

    def notify(self, confirmation: BookingConfirmation, notify_email: str = None,
               user_name: str = None) -> BookingConfirmation:
        """Send the confirmation email for a committed booking, if asked to."""
        booking = confirmation.booking
        if notify_email and self.notifier is not None:
            ok, error = self.notifier(
                to_email=notify_email,
                restaurant_name=confirmation.restaurant.name,
                day=booking.date.isoformat(),
                slot_time=format_time(booking.time),
                seats=booking.seats,
                total_amount=booking.total_amount,
                confirmation_code=booking.confirmation_code,
                user_name=user_name,
            )
            confirmation.notified = ok
            confirmation.notification_error = error

        return confirmation
