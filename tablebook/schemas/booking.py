from pydantic import BaseModel
from typing import Optional
import datetime as dt

from tablebook.models.enums import BookingStatus, PaymentStatus


class BookingBase(BaseModel):
    restaurant_id: int
    date: dt.date
    time: dt.time
    seats: int


class BookingCreate(BookingBase):
    user_id: str
    payment_status: PaymentStatus = PaymentStatus.SKIPPED

    # Optional confirmation email
    notify_email: Optional[str] = None
    user_name: Optional[str] = None


class BookingOut(BookingBase):
    id: int
    user_id: str
    total_amount: float
    payment_status: PaymentStatus
    booking_status: BookingStatus
    confirmation_code: str
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class BookingConfirmationOut(BookingOut):
    restaurant_name: str
    notified: bool = False
