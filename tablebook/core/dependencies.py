from fastapi import Depends

from tablebook.db.session import SessionLocal
from tablebook.services.catalog import RestaurantCatalog
from tablebook.services.ledger import ReservationLedger
from tablebook.services.store import SqlBookingStore

_catalog = None
_ledger = None


def get_catalog() -> RestaurantCatalog:
    global _catalog

    if _catalog is None:
        db = SessionLocal()
        try:
            _catalog = RestaurantCatalog.from_db(db)
        finally:
            db.close()
    return _catalog


def get_ledger(catalog: RestaurantCatalog = Depends(get_catalog)) -> ReservationLedger:
    global _ledger

    if _ledger is None:
        _ledger = ReservationLedger(catalog, SqlBookingStore(SessionLocal), strict_lookup=True)
    return _ledger


def reset_dependencies():
    """Drop the cached catalog and ledger (after reseeding the database)."""
    global _catalog, _ledger
    _catalog = None
    _ledger = None
