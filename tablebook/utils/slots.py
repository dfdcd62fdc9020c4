from datetime import date, datetime, time

from tablebook.core.errors import InvalidInput


def hourly_slots(open_time: time, close_time: time) -> list[time]:
    """Slot starts on the hourly grid inside [open_time, close_time)."""
    first_hour = open_time.hour
    if open_time.minute or open_time.second:
        first_hour += 1

    slots = []
    hour = first_hour
    while hour < 24 and time(hour) < close_time:
        slots.append(time(hour))
        hour += 1
    return slots


def parse_date(value) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        # Full ISO timestamps reduce to their own calendar day
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidInput(f"Invalid date '{value}' (expected YYYY-MM-DD)")
    raise InvalidInput(f"Invalid date: {value!r}")


def parse_time(value) -> time:
    if isinstance(value, datetime):
        return value.time().replace(tzinfo=None)
    if isinstance(value, time):
        return value.replace(tzinfo=None)
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip()).replace(tzinfo=None)
        except ValueError:
            raise InvalidInput(f"Invalid time '{value}' (expected HH:MM)")
    raise InvalidInput(f"Invalid time: {value!r}")


def format_time(t: time) -> str:
    return t.strftime("%H:%M")
