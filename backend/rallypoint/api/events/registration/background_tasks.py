import logging
from typing import List

from rallypoint.core.email.email import send_email

logger = logging.getLogger(__name__)


def send_promotion_emails(promotions: List[dict]):
    """Tell volunteers promoted off the waitlist that they now hold a seat."""
    for payload in promotions:
        recipient = payload["email"]
        logger.info(f"Sending waitlist promotion email to {recipient}")
        try:
            send_email(
                recipients=[recipient],
                subject=f"Good News! You're in: {payload['event_title']}",
                text_template_path="events/waitlist_promotion.email",
                template_context=payload,
            )
        except Exception:
            logger.exception(f"Promotion email to {recipient} failed to send")
