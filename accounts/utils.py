import string
import secrets
import resend
import logging
from datetime import datetime

from django.conf import settings
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


current_year = datetime.now().year


def generate_reference():
    characters = string.ascii_letters + string.digits
    random_string = "".join(secrets.choice(characters) for _ in range(12))
    return random_string.upper()


def generate_member_number():
    year = datetime.now().year % 100  # Last two digits of year
    random_number = "".join(secrets.choice(string.digits) for _ in range(6))
    return f"MBR{year}{random_number}"


def send_email(to, subject, template_name, context):
    """
    Resend email integration. Failures are logged and never raised.
    """
    try:
        email_body = render_to_string(
            template_name, {**context, "current_year": current_year}
        )
        params = {
            "from": settings.DEFAULT_FROM_EMAIL,
            "to": [to],
            "subject": subject,
            "html": email_body,
        }
        response = resend.Emails.send(params)
        logger.info(f"Email sent to {to} with response: {response}")
        return response
    except Exception as e:
        logger.error(f"Error sending email to {to}: {str(e)}")
        return None
