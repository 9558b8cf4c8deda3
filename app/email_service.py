"""
Viewing Email Service
Delivers viewing emails through Resend using MJML templates, or only logs them when
Resend is not configured
"""

import logging
from datetime import datetime
from typing import Optional, Protocol, Union

import resend
from mjml import mjml_to_html

from .config import Settings
from .email_templates import (
    ViewingConfirmation,
    new_inquiry_text,
    viewing_cancellation_template,
    viewing_cancellation_text,
    viewing_confirmation_template,
    viewing_confirmation_text,
    viewing_reminder_template,
    viewing_reminder_text,
)

logger = logging.getLogger(__name__)


class EmailDispatcher(Protocol):
    async def send_confirmation(self, data: ViewingConfirmation) -> bool: ...

    async def send_cancellation(
        self, visitor_email: str, visitor_name: str, property_label: str, viewing_date: datetime
    ) -> bool: ...

    async def send_reminder(self, data: ViewingConfirmation) -> bool: ...

    async def send_owner_notification(self, subject: str, text: str) -> bool: ...


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise RuntimeError(f"Failed to compile MJML template: {str(e)}") from e

    # Depending on the mjml release the result is a dict-like object or a plain string
    if isinstance(result, dict):
        if result.get("errors"):
            logger.warning(f"MJML compilation warnings: {result['errors']}")
        return result.get("html", "")
    html = getattr(result, "html", None)
    if html is not None:
        errors = getattr(result, "errors", None)
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        return html
    return str(result)


class LoggingEmailDispatcher:
    """Renders every message and writes it to the log instead of sending it"""

    async def send_confirmation(self, data: ViewingConfirmation) -> bool:
        viewing_confirmation_text(data)
        logger.info(f"📧 Sending viewing confirmation to {data.visitor_email}")
        logger.info(f"📧 Property: {data.property_title}")
        logger.info(f"📧 Date: {data.viewing_date.isoformat()}")
        return True

    async def send_cancellation(
        self, visitor_email: str, visitor_name: str, property_label: str, viewing_date: datetime
    ) -> bool:
        viewing_cancellation_text(visitor_name, property_label, viewing_date)
        logger.info(f"📧 Sending cancellation notice to {visitor_email}")
        return True

    async def send_reminder(self, data: ViewingConfirmation) -> bool:
        viewing_reminder_text(data)
        logger.info(f"📧 Sending reminder to {data.visitor_email}")
        return True

    async def send_owner_notification(self, subject: str, text: str) -> bool:
        logger.info(f"📧 Owner notification: {subject}")
        logger.debug(text)
        return True


class ResendEmailDispatcher:
    """Sends MJML-rendered email through Resend"""

    def __init__(self, api_key: str, from_address: str, owner_email: Optional[str] = None):
        resend.api_key = api_key
        self.from_address = from_address
        self.owner_email = owner_email

    def _send(self, to: Union[str, list[str]], subject: str, html: str, text: Optional[str] = None) -> dict:
        recipients = [to] if isinstance(to, str) else to
        email_data = {
            "from": self.from_address,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if text:
            email_data["text"] = text

        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response

    async def send_confirmation(self, data: ViewingConfirmation) -> bool:
        self._send(
            to=data.visitor_email,
            subject=f"Viewing Confirmed - {data.property_title}",
            html=compile_mjml_to_html(viewing_confirmation_template(data)),
            text=viewing_confirmation_text(data),
        )
        return True

    async def send_cancellation(
        self, visitor_email: str, visitor_name: str, property_label: str, viewing_date: datetime
    ) -> bool:
        self._send(
            to=visitor_email,
            subject=f"Viewing Cancelled - {property_label}",
            html=compile_mjml_to_html(
                viewing_cancellation_template(visitor_name, property_label, viewing_date)
            ),
            text=viewing_cancellation_text(visitor_name, property_label, viewing_date),
        )
        return True

    async def send_reminder(self, data: ViewingConfirmation) -> bool:
        self._send(
            to=data.visitor_email,
            subject=f"Reminder: Viewing Tomorrow - {data.property_title}",
            html=compile_mjml_to_html(viewing_reminder_template(data)),
            text=viewing_reminder_text(data),
        )
        return True

    async def send_owner_notification(self, subject: str, text: str) -> bool:
        if not self.owner_email:
            logger.warning("⚠️ AGENT_EMAIL not set - owner notification skipped")
            return False
        html = "<br/>".join(text.splitlines())
        self._send(to=self.owner_email, subject=subject, html=html, text=text)
        return True


def build_dispatcher(settings: Settings) -> EmailDispatcher:
    """Pick the dispatcher for this process"""
    if settings.resend_api_key:
        logger.info("✅ Email delivery via Resend enabled")
        return ResendEmailDispatcher(
            api_key=settings.resend_api_key,
            from_address=settings.email_from_address,
            owner_email=settings.agent_email or None,
        )
    logger.warning("⚠️ RESEND_API_KEY missing - emails will only be logged")
    return LoggingEmailDispatcher()


__all__ = [
    "EmailDispatcher",
    "LoggingEmailDispatcher",
    "ResendEmailDispatcher",
    "ViewingConfirmation",
    "build_dispatcher",
    "compile_mjml_to_html",
    "new_inquiry_text",
]
