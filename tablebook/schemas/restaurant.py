from pydantic import BaseModel
from typing import List, Optional
import datetime as dt


class RestaurantOut(BaseModel):
    id: int
    name: str
    cuisine: str
    rating: Optional[float] = None
    address: str
    phone: Optional[str] = None
    description: Optional[str] = None

    total_seats: int
    open_time: dt.time
    close_time: dt.time
    price_per_seat: float

    model_config = {
        "from_attributes": True
    }


class SlotOut(BaseModel):
    time: str
    available_seats: int
    is_available: bool


class AvailabilityOut(BaseModel):
    restaurant_id: int
    date: dt.date
    slots: List[SlotOut] = []
