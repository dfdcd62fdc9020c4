"""Booking stores: the owned collection of bookings behind a ledger.

Both stores expose the same methods. ``insert_if_room`` is the only write
path for new bookings and performs the capacity check and the insert as one
step, so two commits racing for the last seats of a slot cannot both win.
"""
import itertools
import threading
from collections import defaultdict

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from tablebook.core.errors import (
    CapacityExceeded, DuplicateConfirmationCode, InvalidTransition, NotFound,
)
from tablebook.models.booking import Booking
from tablebook.models.enums import ALLOWED_TRANSITIONS, BookingStatus
from tablebook.models.restaurant import Restaurant


def _check_transition(booking: Booking, target: BookingStatus) -> bool:
    """Return True when the status must change, False for a repeat no-op."""
    current = BookingStatus(booking.booking_status)
    if current == target:
        return False
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Booking {booking.id} is {current.value} and cannot become {target.value}"
        )
    return True


def _detached(booking: Booking) -> Booking:
    """Copy of a stored booking; changes to it never reach the store."""
    return Booking(**{c.key: getattr(booking, c.key) for c in Booking.__table__.columns})


def _capacity_error(booking: Booking, available: int) -> CapacityExceeded:
    return CapacityExceeded(
        f"Only {available} seat(s) left at {booking.time.strftime('%H:%M')} "
        f"on {booking.date.isoformat()}, requested {booking.seats}",
        requested=booking.seats,
        available=available,
    )


# =====================================================================
# IN-MEMORY STORE
# =====================================================================
class InMemoryBookingStore:

    def __init__(self):
        self._bookings: dict[int, Booking] = {}
        self._codes: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._slot_locks = defaultdict(threading.Lock)

    def _slot_lock(self, key) -> threading.Lock:
        with self._lock:
            return self._slot_locks[key]

    def _active(self, restaurant_id, day):
        for b in list(self._bookings.values()):
            if (
                b.restaurant_id == restaurant_id
                and b.date == day
                and b.booking_status != BookingStatus.CANCELLED
            ):
                yield b

    def booked_seats(self, restaurant_id, day) -> dict:
        totals = defaultdict(int)
        for b in self._active(restaurant_id, day):
            totals[b.time] += b.seats
        return dict(totals)

    def insert_if_room(self, booking: Booking, capacity: int) -> Booking:
        key = (booking.restaurant_id, booking.date, booking.time)
        with self._slot_lock(key):
            booked = self.booked_seats(booking.restaurant_id, booking.date).get(booking.time, 0)
            available = max(0, capacity - booked)
            if booking.seats > available:
                raise _capacity_error(booking, available)

            with self._lock:
                if booking.confirmation_code in self._codes:
                    raise DuplicateConfirmationCode(booking.confirmation_code)
                booking.id = next(self._ids)
                self._codes[booking.confirmation_code] = booking.id
                self._bookings[booking.id] = booking
        return _detached(booking)

    def code_exists(self, code: str) -> bool:
        return code in self._codes

    def get(self, booking_id):
        booking = self._bookings.get(booking_id)
        return _detached(booking) if booking is not None else None

    def get_by_code(self, code: str):
        booking_id = self._codes.get(code)
        return self.get(booking_id) if booking_id is not None else None

    def transition(self, booking_id, target: BookingStatus) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise NotFound(f"Booking {booking_id} not found")
            if _check_transition(booking, target):
                booking.booking_status = target
            return _detached(booking)

    def list_for_user(self, user_id) -> list[Booking]:
        rows = [_detached(b) for b in list(self._bookings.values()) if b.user_id == user_id]
        return sorted(rows, key=lambda b: (b.created_at, b.id), reverse=True)


# =====================================================================
# SQLALCHEMY STORE
# =====================================================================
class SqlBookingStore:

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def _slot_filter(self, restaurant_id, day):
        return (
            Booking.restaurant_id == restaurant_id,
            Booking.date == day,
            Booking.booking_status != BookingStatus.CANCELLED,
        )

    def booked_seats(self, restaurant_id, day) -> dict:
        with self._session_factory() as db:
            rows = (
                db.query(Booking.time, func.sum(Booking.seats))
                .filter(*self._slot_filter(restaurant_id, day))
                .group_by(Booking.time)
                .all()
            )
        return {t: int(seats) for t, seats in rows}

    def insert_if_room(self, booking: Booking, capacity: int) -> Booking:
        with self._session_factory() as db:
            # Row lock on the restaurant serialises commits for it.
            # SQLite engines take the database lock at BEGIN instead.
            db.query(Restaurant.id).filter(
                Restaurant.id == booking.restaurant_id
            ).with_for_update().first()

            booked = db.query(func.coalesce(func.sum(Booking.seats), 0)).filter(
                *self._slot_filter(booking.restaurant_id, booking.date),
                Booking.time == booking.time,
            ).scalar()

            available = max(0, capacity - int(booked))
            if booking.seats > available:
                db.rollback()
                raise _capacity_error(booking, available)

            db.add(booking)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if "confirmation_code" in str(exc.orig):
                    raise DuplicateConfirmationCode(booking.confirmation_code) from exc
                raise

            db.refresh(booking)
            db.expunge(booking)
        return booking

    def code_exists(self, code: str) -> bool:
        with self._session_factory() as db:
            return db.query(Booking.id).filter(Booking.confirmation_code == code).first() is not None

    def get(self, booking_id):
        with self._session_factory() as db:
            booking = db.get(Booking, booking_id)
            if booking is not None:
                db.expunge(booking)
            return booking

    def get_by_code(self, code: str):
        with self._session_factory() as db:
            booking = db.query(Booking).filter(Booking.confirmation_code == code).first()
            if booking is not None:
                db.expunge(booking)
            return booking

    def transition(self, booking_id, target: BookingStatus) -> Booking:
        with self._session_factory() as db:
            booking = db.get(Booking, booking_id, with_for_update=True)
            if booking is None:
                raise NotFound(f"Booking {booking_id} not found")
            if _check_transition(booking, target):
                booking.booking_status = target
                db.commit()
                db.refresh(booking)
            db.expunge(booking)
            return booking

    def list_for_user(self, user_id) -> list[Booking]:
        with self._session_factory() as db:
            rows = (
                db.query(Booking)
                .filter(Booking.user_id == user_id)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .all()
            )
            db.expunge_all()
            return rows
