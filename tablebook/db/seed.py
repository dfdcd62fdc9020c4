from datetime import time

from sqlalchemy.orm import Session

from tablebook.models.restaurant import Restaurant
from tablebook.models.booking import Booking  # noqa: F401 (Restaurant.bookings target)
from tablebook.core.logging_config import get_logger

logger = get_logger()

SEAT_PRICE = 299.0

DEMO_RESTAURANTS = [
    {
        "id": 1,
        "name": "The Grand Spice",
        "cuisine": "Indian",
        "rating": 4.8,
        "address": "42 MG Road, Coimbatore",
        "phone": "+91 98765 43210",
        "description": "Authentic Indian cuisine with a modern twist. Renowned for biryanis and curries.",
        "total_seats": 80,
        "open_time": time(11, 0),
        "close_time": time(23, 0),
    },
    {
        "id": 2,
        "name": "Sakura Garden",
        "cuisine": "Japanese",
        "rating": 4.6,
        "address": "8 Race Course Road, Coimbatore",
        "phone": "+91 97654 32109",
        "description": "Premium Japanese dining featuring fresh sushi, sashimi, and tempura.",
        "total_seats": 60,
        "open_time": time(12, 0),
        "close_time": time(22, 30),
    },
    {
        "id": 3,
        "name": "Bella Italia",
        "cuisine": "Italian",
        "rating": 4.7,
        "address": "15 Avinashi Road, Coimbatore",
        "phone": "+91 96543 21098",
        "description": "Classic Italian pastas, wood-fired pizzas, and fine wines in an elegant setting.",
        "total_seats": 70,
        "open_time": time(11, 30),
        "close_time": time(23, 30),
    },
    {
        "id": 4,
        "name": "Dragon Palace",
        "cuisine": "Chinese",
        "rating": 4.5,
        "address": "27 RS Puram, Coimbatore",
        "phone": "+91 95432 10987",
        "description": "Authentic Chinese flavors with dim sum, Peking duck, and wok specialties.",
        "total_seats": 100,
        "open_time": time(11, 0),
        "close_time": time(22, 0),
    },
    {
        "id": 5,
        "name": "The Rooftop Grill",
        "cuisine": "Continental",
        "rating": 4.9,
        "address": "1 Town Hall Road, Coimbatore",
        "phone": "+91 94321 09876",
        "description": "Stunning rooftop dining with city views, premium steaks, and craft cocktails.",
        "total_seats": 50,
        "open_time": time(18, 0),
        "close_time": time(23, 0),
    },
]


def demo_restaurants() -> list[Restaurant]:
    return [Restaurant(price_per_seat=SEAT_PRICE, **data) for data in DEMO_RESTAURANTS]


def seed_restaurants(db: Session) -> int:
    """Insert the demo restaurants into an empty table. Safe to call repeatedly."""
    if db.query(Restaurant.id).first() is not None:
        return 0

    restaurants = demo_restaurants()
    db.add_all(restaurants)
    db.commit()

    logger.info(f"Seeded {len(restaurants)} restaurants")
    return len(restaurants)
