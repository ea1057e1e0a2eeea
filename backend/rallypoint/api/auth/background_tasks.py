import logging

from rallypoint.config import settings
from rallypoint.core.email.email import send_email

logger = logging.getLogger(__name__)


def send_password_reset_email(recipient: str, full_name: str, reset_url: str):
    logger.info(f"Sending password reset email to {recipient}")
    try:
        return send_email(
            recipients=[recipient],
            subject=(
                "Your Password Reset Token "
                f"(Valid for {settings.PASSWORD_RESET_EXPIRE_MINUTES} min)"
            ),
            text_template_path="auth/password_reset.email",
            template_context={
                "full_name": full_name,
                "reset_url": reset_url,
                "expires_minutes": settings.PASSWORD_RESET_EXPIRE_MINUTES,
            },
        )
    except Exception:
        logger.exception(f"Password reset email to {recipient} failed to send")
        return None
