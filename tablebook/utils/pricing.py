def calculate_booking_amount(restaurant, seats: int) -> float:
    # Flat per-seat rate, no weekend or deposit surcharges
    total = seats * restaurant.price_per_seat
    return round(total, 2)
