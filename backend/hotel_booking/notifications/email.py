"""Transactional e-mail templates and a simulated sender.

Messages are rendered and written to the log instead of being handed to an
SMTP relay; delivery is fire-and-forget from the caller's perspective.
"""

import logging

from hotel_booking.config import settings

logger = logging.getLogger(__name__)

TEMPLATES = {
    "otp": {
        "subject": "Your OTP Code",
        "body": (
            "Hello,\n\n"
            "Use the code below to complete your verification. "
            "This code is valid for {ttl_minutes} minutes.\n\n"
            "    {otp}\n\n"
            "If you did not request this, please ignore this email."
        ),
    },
    "reservation_confirmed": {
        "subject": "Reservation confirmed: room {room_number}",
        "body": (
            "Dear {guest_name},\n\n"
            "Your reservation for room {room_number} from {check_in} to {check_out} "
            "is confirmed.\n\n"
            "We look forward to welcoming you!"
        ),
    },
    "reservation_cancelled": {
        "subject": "Reservation cancelled: room {room_number}",
        "body": (
            "Dear {guest_name},\n\n"
            "Your reservation for room {room_number} ({check_in} to {check_out}) "
            "has been cancelled."
        ),
    },
}


def render(template: str, **context: str) -> tuple[str, str]:
    """Return ``(subject, body)`` for a named template."""
    tmpl = TEMPLATES[template]
    return tmpl["subject"].format(**context), tmpl["body"].format(**context)


async def send_email(to: str, template: str, **context: str) -> dict:
    """Render ``template`` and send it to ``to`` (simulated).

    Returns the composed message so callers and tests can inspect it.
    """
    subject, body = render(template, **context)
    logger.info("Email [%s] from %s to %s: %s", template, settings.mail_from, to, subject)
    return {"status": "simulated", "to": to, "subject": subject, "body": body}
