from sqlalchemy.orm import Session

from tablebook.models.restaurant import Restaurant


class RestaurantCatalog:
    """Read-only restaurant reference data, keyed by id."""

    def __init__(self, restaurants=()):
        self._restaurants = {r.id: r for r in restaurants}

    @classmethod
    def from_db(cls, db: Session) -> "RestaurantCatalog":
        restaurants = db.query(Restaurant).order_by(Restaurant.id).all()
        return cls(restaurants)

    def get_restaurant_by_id(self, restaurant_id):
        return self._restaurants.get(restaurant_id)

    def list_restaurants(self) -> list[Restaurant]:
        return [self._restaurants[k] for k in sorted(self._restaurants)]

    def __len__(self):
        return len(self._restaurants)
