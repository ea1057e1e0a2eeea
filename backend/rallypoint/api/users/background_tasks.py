import logging

from rallypoint.core.email.email import send_email

logger = logging.getLogger(__name__)


def send_welcome_email(recipient: str, full_name: str):
    logger.info(f"Sending welcome email to {recipient}")
    try:
        return send_email(
            recipients=[recipient],
            subject="Welcome to RallyPoint!",
            text_template_path="users/welcome.email",
            template_context={"full_name": full_name},
        )
    except Exception:
        # The account is already committed; a lost welcome email is not fatal.
        logger.exception(f"Welcome email to {recipient} failed to send")
        return None
