import logging
import os
from typing import Any, List, Dict, Optional, Union

import boto3
from jinja2 import Template
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from rallypoint.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "templates", "email"
)


def render_template(
    template_path: Optional[str] = None,
    template_str: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Render a Jinja2 template from either a file path or a template string.

    :param template_path: Path to the template file, relative to templates/email
    :param template_str: Direct template string
    :param context: Context dictionary for template rendering
    :return: Rendered template string
    """
    if template_path:
        template_path = os.path.join(TEMPLATE_DIR, template_path)
        if not os.path.exists(template_path):
            raise FileNotFoundError(f"Template file not found: {template_path}")

        with open(template_path, "r", encoding="utf-8") as file:
            template_str = file.read()

    if not template_str:
        raise ValueError("Either template_path or template_str must be provided")

    template = Template(template_str)
    return template.render(context or {})


def send_email(
    recipients: Union[str, List[str]],
    subject: str,
    body_text: Optional[str] = None,
    body_html: Optional[str] = None,
    text_template_path: Optional[str] = None,
    html_template_path: Optional[str] = None,
    template_context: Optional[Dict[str, Any]] = None,
    sender: Optional[str] = None,
) -> Optional[Dict]:
    """
    Send an email through SES.

    Returns the SES response, or None when SES credentials are not configured.
    Errors from SES propagate to the caller.
    """
    if isinstance(recipients, str):
        recipients = [recipients]

    if not settings.email_enabled:
        logger.warning(
            "SES is not configured, skipping email %r to %s", subject, recipients
        )
        return None

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = sender or settings.SES_DEFAULT_SENDER
    msg["To"] = ", ".join(recipients)

    if text_template_path:
        body_text = render_template(
            template_path=text_template_path, context=template_context
        )
    if html_template_path:
        body_html = render_template(
            template_path=html_template_path, context=template_context
        )

    if body_text:
        msg.attach(MIMEText(body_text, "plain"))

    if body_html:
        msg.attach(MIMEText(body_html, "html"))

    ses_client = boto3.client(
        "ses",
        region_name=settings.SES_REGION,
        aws_access_key_id=settings.SES_ACCESS_KEY,
        aws_secret_access_key=settings.SES_SECRET_KEY,
    )

    response = ses_client.send_raw_email(
        Source=msg["From"],
        Destinations=recipients,
        RawMessage={"Data": msg.as_string()},
    )
    logger.info("Email %r sent, message id %s", subject, response["MessageId"])
    return response
