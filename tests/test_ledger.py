import re
from datetime import datetime, time, timezone, timedelta

import pytest

from conftest import BELLA_ITALIA, BOOKING_DAY, GRAND_SPICE, SAKURA_GARDEN
from tablebook.core.errors import (
    BookingError, CapacityExceeded, InvalidInput, InvalidSlot, InvalidTransition, NotFound,
)
from tablebook.models.enums import BookingStatus, PaymentStatus
from tablebook.services.ledger import ReservationLedger


def slot_seats(ledger, restaurant_id, at, day=BOOKING_DAY):
    for slot in ledger.get_available_slots(restaurant_id, day):
        if slot.time == at:
            return slot.available_seats
    raise AssertionError(f"no slot at {at}")


def book(ledger, seats, at=time(19), user="user-1", restaurant_id=GRAND_SPICE, day=BOOKING_DAY):
    return ledger.commit_booking(
        restaurant_id, day, at, seats, user, PaymentStatus.PAID, seats * 299.0
    )


# ---------------------------------------------------------------------
# AVAILABILITY
# ---------------------------------------------------------------------
def test_empty_day_has_one_full_slot_per_hour(ledger):
    slots = ledger.get_available_slots(GRAND_SPICE, BOOKING_DAY)

    assert [s.time for s in slots] == [time(h) for h in range(11, 23)]
    assert all(s.available_seats == 80 and s.is_available for s in slots)


def test_reference_scenario(ledger):
    first = book(ledger, 45)
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 35

    with pytest.raises(CapacityExceeded) as err:
        book(ledger, 40)
    assert err.value.available == 35
    assert err.value.requested == 40

    book(ledger, 35)
    slot = [s for s in ledger.get_available_slots(GRAND_SPICE, BOOKING_DAY) if s.time == time(19)][0]
    assert slot.available_seats == 0
    assert slot.is_available is False

    ledger.cancel_booking(first.id)
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 45


def test_other_slots_and_days_are_untouched(ledger):
    book(ledger, 30)

    assert slot_seats(ledger, GRAND_SPICE, time(18)) == 80
    assert slot_seats(ledger, GRAND_SPICE, time(19), day=BOOKING_DAY + timedelta(days=1)) == 80
    assert slot_seats(ledger, 4, time(19)) == 100


def test_availability_is_idempotent(ledger):
    book(ledger, 12)
    assert ledger.get_available_slots(GRAND_SPICE, BOOKING_DAY) == ledger.get_available_slots(GRAND_SPICE, BOOKING_DAY)


def test_unknown_restaurant_gives_empty_list(ledger):
    assert ledger.get_available_slots(999, BOOKING_DAY) == []


def test_malformed_date_is_rejected_even_for_unknown_restaurant(ledger):
    with pytest.raises(InvalidInput):
        ledger.get_available_slots(999, "20/11/2026")
    with pytest.raises(InvalidInput):
        ledger.get_available_slots(GRAND_SPICE, "20/11/2026")


def test_unknown_restaurant_strict_lookup(catalog):
    strict = ReservationLedger(catalog, strict_lookup=True)
    with pytest.raises(NotFound):
        strict.get_available_slots(999, BOOKING_DAY)


def test_half_hour_opening_starts_on_next_hour(memory_ledger):
    bella = memory_ledger.get_available_slots(BELLA_ITALIA, BOOKING_DAY)
    assert bella[0].time == time(12)
    assert bella[-1].time == time(23)

    sakura = memory_ledger.get_available_slots(SAKURA_GARDEN, BOOKING_DAY)
    assert [s.time for s in sakura] == [time(h) for h in range(12, 23)]


def test_date_inputs_match_by_calendar_day(ledger):
    aware = datetime(2026, 11, 20, 21, 45, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    book(ledger, 10, day=aware)
    book(ledger, 5, day="2026-11-20")

    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 65


# ---------------------------------------------------------------------
# COMMIT
# ---------------------------------------------------------------------
def test_commit_creates_confirmed_booking(ledger):
    booking = book(ledger, 4, user="diner-7")

    assert booking.id is not None
    assert booking.booking_status == BookingStatus.CONFIRMED
    assert booking.payment_status == PaymentStatus.PAID
    assert booking.total_amount == 4 * 299.0
    assert booking.date == BOOKING_DAY
    assert booking.time == time(19)
    assert re.fullmatch(r"RES[A-Z0-9]{6}", booking.confirmation_code)
    assert isinstance(booking.created_at, datetime)


def test_exactly_filling_a_slot_then_one_more_fails(ledger):
    book(ledger, 80, at=time(12))
    assert slot_seats(ledger, GRAND_SPICE, time(12)) == 0

    with pytest.raises(CapacityExceeded):
        book(ledger, 1, at=time(12))


@pytest.mark.parametrize("at", [time(10), time(23), time(0), time(19, 30), "22:59", "23:00"])
def test_times_off_the_grid_are_rejected(ledger, at):
    with pytest.raises(InvalidSlot):
        book(ledger, 2, at=at)


def test_string_times_are_accepted(ledger):
    booking = book(ledger, 2, at="20:00")
    assert booking.time == time(20)


@pytest.mark.parametrize("seats", [0, -3, "2", 1.5, True, None])
def test_bad_seat_counts_are_invalid_input(ledger, seats):
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, BOOKING_DAY, time(19), seats, "u", "paid", 0)


def test_bad_inputs(ledger):
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, "20-11-2026", time(19), 2, "u", "paid", 598)
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, BOOKING_DAY, "7pm", 2, "u", "paid", 598)
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, BOOKING_DAY, time(19), 2, "u", "refunded", 598)
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, BOOKING_DAY, time(19), 2, "u", "paid", -1)
    with pytest.raises(InvalidInput):
        ledger.commit_booking(GRAND_SPICE, BOOKING_DAY, time(19), 2, "", "paid", 598)


def test_commit_to_unknown_restaurant(ledger):
    with pytest.raises(NotFound):
        book(ledger, 2, restaurant_id=42)


def test_failed_commit_leaves_no_trace(ledger):
    with pytest.raises(CapacityExceeded):
        book(ledger, 81)
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 80
    assert ledger.list_bookings_for_user("user-1") == []


# ---------------------------------------------------------------------
# CONFIRMATION CODES
# ---------------------------------------------------------------------
def test_confirmation_codes_are_unique(ledger):
    codes = {book(ledger, 1, at=time(h)).confirmation_code for h in range(11, 23)}
    assert len(codes) == 12


def test_colliding_code_is_regenerated(catalog):
    codes = iter(["RESAAAAAA", "RESAAAAAA", "RESAAAAAA", "RESBBBBBB"])
    ledger = ReservationLedger(catalog, code_generator=lambda: next(codes))

    assert book(ledger, 2).confirmation_code == "RESAAAAAA"
    assert book(ledger, 2).confirmation_code == "RESBBBBBB"


def test_gives_up_when_no_unique_code_can_be_found(catalog):
    ledger = ReservationLedger(catalog, code_generator=lambda: "RESSAME00")
    book(ledger, 2)

    with pytest.raises(BookingError):
        book(ledger, 2)


def test_lookup_by_code_ignores_case(ledger):
    booking = book(ledger, 3)

    found = ledger.get_booking_by_code(booking.confirmation_code.lower())
    assert found.id == booking.id

    with pytest.raises(NotFound):
        ledger.get_booking_by_code("RES000000")


# ---------------------------------------------------------------------
# CANCEL / COMPLETE
# ---------------------------------------------------------------------
def test_cancel_restores_exactly_the_booked_seats(ledger):
    book(ledger, 20)
    target = book(ledger, 7)
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 53

    cancelled = ledger.cancel_booking(target.id)

    assert cancelled.booking_status == BookingStatus.CANCELLED
    assert cancelled.confirmation_code == target.confirmation_code
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 60


def test_cancel_is_idempotent(ledger):
    booking = book(ledger, 5)
    ledger.cancel_booking(booking.id)
    again = ledger.cancel_booking(booking.id)

    assert again.booking_status == BookingStatus.CANCELLED
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 80


def test_cancel_unknown_booking(ledger):
    with pytest.raises(NotFound):
        ledger.cancel_booking(12345)


def test_completed_bookings_still_hold_seats(ledger):
    booking = book(ledger, 10)
    completed = ledger.complete_booking(booking.id)

    assert completed.booking_status == BookingStatus.COMPLETED
    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 70
    assert ledger.complete_booking(booking.id).booking_status == BookingStatus.COMPLETED


def test_terminal_statuses_cannot_change(ledger):
    done = book(ledger, 2)
    ledger.complete_booking(done.id)
    with pytest.raises(InvalidTransition):
        ledger.cancel_booking(done.id)

    gone = book(ledger, 2)
    ledger.cancel_booking(gone.id)
    with pytest.raises(InvalidTransition):
        ledger.complete_booking(gone.id)


def test_complete_unknown_booking(ledger):
    with pytest.raises(NotFound):
        ledger.complete_booking(999)


# ---------------------------------------------------------------------
# USER BOOKINGS
# ---------------------------------------------------------------------
def test_user_bookings_newest_first_any_status(ledger):
    first = book(ledger, 2, at=time(12), user="alice")
    book(ledger, 2, at=time(13), user="bob")
    second = book(ledger, 2, at=time(14), user="alice")
    third = book(ledger, 2, at=time(15), user="alice")
    ledger.cancel_booking(second.id)

    rows = ledger.list_bookings_for_user("alice")

    assert [b.id for b in rows] == [third.id, second.id, first.id]
    assert rows[1].booking_status == BookingStatus.CANCELLED
    assert [b.id for b in ledger.list_bookings_for_user("alice")] == [b.id for b in rows]
    assert ledger.list_bookings_for_user("nobody") == []


def test_get_booking(ledger):
    booking = book(ledger, 2)
    assert ledger.get_booking(booking.id).confirmation_code == booking.confirmation_code
    with pytest.raises(NotFound):
        ledger.get_booking(777)


def test_returned_bookings_are_copies(ledger):
    booking = book(ledger, 10)
    booking.booking_status = BookingStatus.CANCELLED
    ledger.get_booking(booking.id).seats = 1
    ledger.list_bookings_for_user("user-1")[0].booking_status = BookingStatus.CANCELLED

    assert slot_seats(ledger, GRAND_SPICE, time(19)) == 70
    stored = ledger.get_booking(booking.id)
    assert stored.booking_status == BookingStatus.CONFIRMED
    assert stored.seats == 10

    # the status rules still apply to the stored booking
    ledger.complete_booking(booking.id)
    with pytest.raises(InvalidTransition):
        ledger.cancel_booking(booking.id)
