import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))


class Config:
    # Database (SQLite file next to the project by default)
    DATABASE_URL = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "tablebook.db")
    )

    # Redis availability cache (disabled when unset)
    REDIS_URL = os.getenv("REDIS_URL")
    SLOT_CACHE_TTL = int(os.getenv("SLOT_CACHE_TTL", "60"))

    # Logging
    LOG_DIR = os.getenv("LOG_DIR", "logs")

    # Confirmation codes: prefix + random suffix
    CONFIRMATION_PREFIX = os.getenv("CONFIRMATION_PREFIX", "RES")
    CONFIRMATION_LENGTH = 6
    CONFIRMATION_MAX_ATTEMPTS = 20

    # Load demo restaurants into an empty database at startup
    SEED_RESTAURANTS = os.getenv("SEED_RESTAURANTS", "true").lower() == "true"

    # Email (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"


config = Config()
