import smtplib
from email.message import EmailMessage

from tablebook.core.config import config
from tablebook.core.logging_config import get_logger

logger = get_logger()


def build_confirmation_body(user_name, restaurant_name, day, slot_time, seats,
                            total_amount, confirmation_code) -> str:
    greeting = f"Hi {user_name}," if user_name else "Hi,"
    return "\n".join([
        greeting,
        "",
        "Your table has been booked!",
        "",
        f"Restaurant:        {restaurant_name}",
        f"Date:              {day}",
        f"Time:              {slot_time}",
        f"Guests:            {seats} persons",
        f"Total Amount:      ₹{total_amount:,.2f}",
        f"Confirmation Code: {confirmation_code}",
        "",
        "Please show this confirmation code at the restaurant. Enjoy your meal!",
    ])


def send_booking_confirmation(to_email: str, restaurant_name: str, day, slot_time, seats: int,
                              total_amount: float, confirmation_code: str, user_name: str = None):
    host = config.SMTP_HOST
    port = config.SMTP_PORT
    username = config.SMTP_USERNAME
    password = config.SMTP_PASSWORD
    from_email = config.SMTP_FROM_EMAIL or username
    use_tls = config.SMTP_USE_TLS

    log = logger.bind(log_type="notification")

    if not host or not from_email:
        log.info(f"Confirmation email skipped for {confirmation_code}: SMTP not configured")
        return False, "Email not configured"

    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = f"Booking Confirmed – {restaurant_name}"
    msg.set_content(build_confirmation_body(
        user_name, restaurant_name, day, slot_time, seats, total_amount, confirmation_code
    ))

    try:
        with smtplib.SMTP(host, port, timeout=10) as server:
            if use_tls:
                server.starttls()
            if username and password:
                server.login(username, password)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        log.error(f"Confirmation email failed for {confirmation_code} -> {to_email}: {exc}")
        return False, str(exc)

    log.info(f"Confirmation email sent for {confirmation_code} -> {to_email}")
    return True, None
