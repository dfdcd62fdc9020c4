from loguru import logger
import os

from tablebook.core.config import config

LOG_DIR = config.LOG_DIR

# Create folder if missing
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

# Remove default handler
logger.remove()

# General application log
logger.add(
    f"{LOG_DIR}/app.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    format="{time} | {level} | {message}"
)

# Booking logs (commits, cancellations, completions)
logger.add(
    f"{LOG_DIR}/bookings.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=lambda record: record["extra"].get("log_type") == "booking",
    format="{time} | {level} | {message}"
)

# Confirmation email logs
logger.add(
    f"{LOG_DIR}/notifications.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=lambda record: record["extra"].get("log_type") == "notification",
    format="{time} | {level} | {message}"
)

# Error logs
logger.add(
    f"{LOG_DIR}/errors.log",
    rotation="1 week",
    retention="8 weeks",
    level="ERROR",
    enqueue=True,
)

def get_logger():
    return logger
