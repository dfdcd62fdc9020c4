from fastapi import APIRouter, Depends, HTTPException, Query

from tablebook.core.dependencies import get_catalog, get_ledger
from tablebook.core.redis import get_cache, get_slots_version, set_cache, slots_cache_key
from tablebook.schemas.restaurant import AvailabilityOut, RestaurantOut
from tablebook.services.catalog import RestaurantCatalog
from tablebook.services.ledger import ReservationLedger
from tablebook.utils.slots import parse_date

router = APIRouter(prefix="/restaurants", tags=["Restaurants"])


# =====================================================================
# LIST RESTAURANTS
# =====================================================================
@router.get("/", response_model=list[RestaurantOut])
def list_restaurants(catalog: RestaurantCatalog = Depends(get_catalog)):
    return catalog.list_restaurants()


# =====================================================================
# RESTAURANT DETAILS
# =====================================================================
@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(restaurant_id: int, catalog: RestaurantCatalog = Depends(get_catalog)):
    restaurant = catalog.get_restaurant_by_id(restaurant_id)
    if not restaurant:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


# =====================================================================
# AVAILABLE TIME SLOTS
# =====================================================================
@router.get("/{restaurant_id}/slots", response_model=AvailabilityOut)
def available_slots(
    restaurant_id: int,
    date_str: str = Query(..., alias="date"),
    ledger: ReservationLedger = Depends(get_ledger),
):
    target_date = parse_date(date_str)
    key = slots_cache_key(restaurant_id, target_date, get_slots_version(restaurant_id, target_date))

    cached = get_cache(key)
    if cached is not None:
        return {"restaurant_id": restaurant_id, "date": target_date, "slots": cached}

    slots = [s.to_dict() for s in ledger.get_available_slots(restaurant_id, target_date)]
    set_cache(key, slots)

    return {"restaurant_id": restaurant_id, "date": target_date, "slots": slots}
