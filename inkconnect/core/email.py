"""
inkconnect/core/email.py

Email Sending Utilities

Handles sending transactional emails for:
- Contact form notification to the studio
- Contact form confirmation to the submitter
- Account created by a studio admin
"""

import logging
from datetime import datetime
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from pydantic import EmailStr
from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, ReplyTo, To

from inkconnect.core.config import settings
from inkconnect.core.exceptions import UpstreamError

# Logger configuration
logger = logging.getLogger(__name__)

# Jinja2 template environment setup
jinja_env = Environment(
    loader=FileSystemLoader(settings.mail_templates_path),
    autoescape=select_autoescape(["html", "xml"]),
)
logger.info(f"Jinja2 environment initialized with templates in: {settings.mail_templates_path}")


def _render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Renders an email template using Jinja2 with provided context.
    Args:
        template_name (str): Name of the template file.
        context (dict[str, Any]): Variables to pass to the template.
    Returns:
        str: Rendered HTML content.
    """
    try:
        template = jinja_env.get_template(template_name)
        full_context = {
            "year": datetime.now().year,
            "company_name": settings.MAIL_FROM_NAME or settings.APP_NAME,
            "app_name": settings.APP_NAME,
            "base_url": str(settings.BASE_URL).rstrip("/"),
            "support_email": str(settings.SUPPORT_EMAIL),
            "studio_address": settings.STUDIO_ADDRESS,
            "studio_phone": settings.STUDIO_PHONE,
            **context,
        }
        rendered_content = template.render(full_context)
        logger.debug(f"Successfully rendered template: {template_name}")
        return rendered_content
    except TemplateError as e:
        logger.error(f"Failed to render template '{template_name}': {str(e)}")
        raise UpstreamError(f"Failed to render email template {template_name}") from e


async def _send_email(
    to_email: EmailStr | str,
    subject: str,
    html_content: str,
    reply_to: str | None = None,
) -> None:
    """
    Sends an email using SendGrid API.
    Args:
        to_email (EmailStr): Recipient's email address.
        subject (str): Email subject line.
        html_content (str): HTML content of the email.
        reply_to (str | None): Optional Reply-To address.
    """
    if not settings.EMAILS_ENABLED:
        logger.warning(
            f"Email sending disabled. Skipping send to {to_email} for subject '{subject}'"
        )
        return

    if not all([settings.SENDGRID_API_KEY, settings.MAIL_FROM]):
        logger.error("SendGrid API Key or MAIL_FROM setting is missing")
        raise UpstreamError("Email service configuration missing")

    message = Mail(
        from_email=From(email=str(settings.MAIL_FROM), name=settings.MAIL_FROM_NAME or settings.APP_NAME),
        to_emails=To(str(to_email)),
        subject=subject,
        html_content=html_content,
    )
    if reply_to:
        message.reply_to = ReplyTo(reply_to)

    try:
        sg = SendGridAPIClient(settings.SENDGRID_API_KEY)
        response = sg.client.mail.send.post(request_body=message.get())
    except HTTPError as e:
        logger.error(f"Failed to send email to {to_email}: {str(e)}")
        raise UpstreamError("Failed to send email via provider") from e
    except OSError as e:
        # URLError and socket timeouts from the urllib transport
        logger.error(f"Could not reach the mail provider for {to_email}: {e}")
        raise UpstreamError(f"Could not reach the mail provider: {e}") from e

    logger.info(
        f"Email sent to {to_email} for subject '{subject}' with status code {response.status_code}"
    )
    if response.status_code >= 300:
        logger.error(f"SendGrid API error: Status={response.status_code}, Body={response.body}")
        raise UpstreamError("Failed to send email via provider")


async def send_contact_notification(name: str, email: str, subject: str, message: str) -> None:
    """Forwards a contact form submission to the studio inbox."""
    html_content = _render_template(
        "contact_notification.html",
        {"name": name, "email": email, "subject": subject, "message": message},
    )
    await _send_email(settings.STUDIO_EMAIL, f"Contact Form: {subject}", html_content, reply_to=email)
    logger.info(f"Contact notification for '{subject}' sent to studio")


async def send_contact_confirmation(name: str, email: str, subject: str, message: str) -> None:
    """Acknowledges a contact form submission to the person who sent it."""
    html_content = _render_template(
        "contact_confirmation.html",
        {"name": name, "subject": subject, "message": message},
    )
    await _send_email(email, f"Thank you for contacting {settings.APP_NAME}!", html_content)
    logger.info(f"Contact confirmation sent to {email}")


async def send_account_created_email(to_email: EmailStr | str, full_name: str, role: str) -> None:
    """
    Tells a person that a studio admin created an account for them.
    Args:
        to_email (EmailStr): Recipient's email address.
        full_name (str): Name on the new account.
        role (str): Role assigned to the account.
    """
    base_url_str = str(settings.BASE_URL).rstrip("/")
    html_content = _render_template(
        "account_created.html",
        {"full_name": full_name, "role": role, "login_url": f"{base_url_str}/auth/login"},
    )
    await _send_email(to_email, f"Your {settings.APP_NAME} account is ready", html_content)
    logger.info(f"Account created email sent to {to_email}")
