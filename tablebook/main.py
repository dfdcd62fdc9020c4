from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tablebook.api.routes import bookings, restaurants
from tablebook.core.config import config
from tablebook.core.dependencies import reset_dependencies
from tablebook.core.errors import BookingError
from tablebook.core.logging_config import get_logger
from tablebook.db.seed import seed_restaurants
from tablebook.db.session import Base, SessionLocal, engine

logger = get_logger()


def init_db():
    Base.metadata.create_all(engine)

    if config.SEED_RESTAURANTS:
        db = SessionLocal()
        try:
            seed_restaurants(db)
        finally:
            db.close()
    reset_dependencies()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="Table Booking API",
    version="1.0.0",
    description="API for restaurant table availability and bookings",
    lifespan=lifespan,
)

# Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# Booking errors -> JSON (404 / 400 / 409 / 422)
@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    logger.warning(f"{exc.kind.upper()}: {request.method} {request.url} -> {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


# CORS (mobile client)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(restaurants.router)
app.include_router(bookings.router)

@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
