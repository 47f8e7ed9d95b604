"""Email dispatchers: SendGrid for production, log-only for development.

Dispatch failures are logged and reported as False; callers never see them.
"""

import asyncio
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.application.interfaces.services import EmailTemplate, IEmailDispatcher
from app.core.config import Settings
from app.infrastructure.external.email.templates import RenderedEmail, render_email

logger = logging.getLogger(__name__)


class SendGridEmailDispatcher:
    """Sends rendered templates via the SendGrid API (blocking client run in a thread)."""

    def __init__(self, api_key: str, from_email: str, app_name: str = "ATS") -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.app_name = app_name

    def _send(self, recipient: str, email: RenderedEmail) -> None:
        message = Mail(
            from_email=self.from_email,
            to_emails=recipient,
            subject=email.subject,
            html_content=email.html,
        )
        sg = SendGridAPIClient(self.api_key)
        sg.send(message)

    async def dispatch(
        self, recipient: str, template: EmailTemplate, data: dict[str, Any]
    ) -> bool:
        try:
            email = render_email(template, data, self.app_name)
            await asyncio.to_thread(self._send, recipient, email)
        except Exception as e:
            # Provider errors stay in the logs; the account flow continues.
            logger.exception("Email send failed (template=%s): %s", template.value, e)
            return False
        logger.info("Email sent (template=%s)", template.value)
        return True


class LoggingEmailDispatcher:
    """Renders and logs instead of sending. Used when no provider is configured."""

    def __init__(self, app_name: str = "ATS") -> None:
        self.app_name = app_name

    async def dispatch(
        self, recipient: str, template: EmailTemplate, data: dict[str, Any]
    ) -> bool:
        try:
            email = render_email(template, data, self.app_name)
        except Exception:
            logger.exception("Email render failed (template=%s)", template.value)
            return False
        logger.info(
            "[EMAIL MOCK] %s to %s: %s", template.value, recipient, email.subject
        )
        return True


def build_email_dispatcher(settings: Settings) -> IEmailDispatcher:
    """Create the dispatcher selected by settings.email_provider."""
    if settings.email_provider == "sendgrid" and settings.sendgrid_api_key:
        return SendGridEmailDispatcher(
            settings.sendgrid_api_key.get_secret_value(),
            settings.email_from,
            app_name=settings.app_name,
        )
    return LoggingEmailDispatcher(app_name=settings.app_name)
