from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from tablebook.core.config import config


def use_immediate_transactions(engine):
    """Take the SQLite write lock when a transaction begins.

    pysqlite defers BEGIN until the first write statement, which leaves the
    seat count read by ``SqlBookingStore.insert_if_room`` outside the
    transaction. SQLite ignores ``FOR UPDATE``, so the lock is taken here.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

if engine.dialect.name == "sqlite":
    use_immediate_transactions(engine)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
