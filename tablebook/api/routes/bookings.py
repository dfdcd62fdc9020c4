from fastapi import APIRouter, Depends

from tablebook.core.dependencies import get_catalog, get_ledger
from tablebook.core.logging_config import get_logger
from tablebook.core.redis import bump_slots_version
from tablebook.schemas.booking import BookingConfirmationOut, BookingCreate, BookingOut
from tablebook.services.catalog import RestaurantCatalog
from tablebook.services.facade import BookingSession
from tablebook.services.ledger import ReservationLedger
from tablebook.services.notifications import send_booking_confirmation

router = APIRouter(prefix="/bookings", tags=["Bookings"])
logger = get_logger()


def invalidate_slots(booking):
    bump_slots_version(booking.restaurant_id, booking.date)


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
@router.post("/", response_model=BookingConfirmationOut, status_code=201)
def create_booking(
    data: BookingCreate,
    ledger: ReservationLedger = Depends(get_ledger),
    catalog: RestaurantCatalog = Depends(get_catalog),
):
    session = BookingSession(ledger, catalog, notifier=send_booking_confirmation)
    session.select_restaurant(data.restaurant_id)
    session.select_date(data.date)
    session.select_time(data.time)
    session.select_seats(data.seats)

    confirmation = session.confirm(data.user_id, data.payment_status)
    booking = confirmation.booking

    # Cached slots must not outlive the commit while the email is sent
    invalidate_slots(booking)
    session.notify(confirmation, data.notify_email, data.user_name)

    return BookingConfirmationOut(
        **BookingOut.model_validate(booking).model_dump(),
        restaurant_name=confirmation.restaurant.name,
        notified=confirmation.notified,
    )


# ---------------------------------------------------------------------
# MY BOOKINGS
# ---------------------------------------------------------------------
@router.get("/", response_model=list[BookingOut])
def user_bookings(user_id: str, ledger: ReservationLedger = Depends(get_ledger)):
    return ledger.list_bookings_for_user(user_id)


# ---------------------------------------------------------------------
# LOOKUP BY CONFIRMATION CODE
# ---------------------------------------------------------------------
@router.get("/code/{confirmation_code}", response_model=BookingOut)
def booking_by_code(confirmation_code: str, ledger: ReservationLedger = Depends(get_ledger)):
    return ledger.get_booking_by_code(confirmation_code)


# ---------------------------------------------------------------------
# CANCEL BOOKING
# ---------------------------------------------------------------------
@router.delete("/{booking_id}", response_model=BookingOut)
def cancel_booking(booking_id: int, ledger: ReservationLedger = Depends(get_ledger)):
    booking = ledger.cancel_booking(booking_id)
    invalidate_slots(booking)
    return booking


# ---------------------------------------------------------------------
# MARK COMPLETED
# ---------------------------------------------------------------------
@router.post("/{booking_id}/complete", response_model=BookingOut)
def complete_booking(booking_id: int, ledger: ReservationLedger = Depends(get_ledger)):
    booking = ledger.complete_booking(booking_id)
    invalidate_slots(booking)
    return booking
