import os
import tempfile
from datetime import date

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "tablebook-test-logs"))
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("REDIS_URL", None)
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tablebook.core.dependencies import get_catalog, get_ledger
from tablebook.db.seed import demo_restaurants
from tablebook.db.session import Base, use_immediate_transactions
from tablebook.main import app
from tablebook.services.catalog import RestaurantCatalog
from tablebook.services.ledger import ReservationLedger
from tablebook.services.store import SqlBookingStore

BOOKING_DAY = date(2026, 11, 20)

GRAND_SPICE = 1      # 80 seats, 11:00-23:00
SAKURA_GARDEN = 2    # 60 seats, 12:00-22:30
BELLA_ITALIA = 3     # 70 seats, 11:30-23:30


@pytest.fixture
def catalog():
    return RestaurantCatalog(demo_restaurants())


@pytest.fixture
def memory_ledger(catalog):
    return ReservationLedger(catalog)


def seeded_factory(engine):
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    with factory() as db:
        db.add_all(demo_restaurants())
        db.commit()
    return factory


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield seeded_factory(engine)
    engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """File-backed SQLite with a connection per thread, as the app runs it."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookings.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    use_immediate_transactions(engine)
    yield seeded_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_ledger(session_factory):
    with session_factory() as db:
        catalog = RestaurantCatalog.from_db(db)
    return ReservationLedger(catalog, SqlBookingStore(session_factory))


@pytest.fixture(params=["memory", "sql"])
def ledger(request):
    """Run the test against both booking stores."""
    return request.getfixturevalue(f"{request.param}_ledger")


@pytest.fixture
def client(catalog):
    api_ledger = ReservationLedger(catalog, strict_lookup=True)
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_ledger] = lambda: api_ledger
    yield TestClient(app)
    app.dependency_overrides.clear()
