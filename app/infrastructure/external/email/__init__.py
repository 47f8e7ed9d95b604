"""Outbound email: templates and dispatchers."""

from app.infrastructure.external.email.dispatcher import (
    LoggingEmailDispatcher,
    SendGridEmailDispatcher,
    build_email_dispatcher,
)
from app.infrastructure.external.email.templates import RenderedEmail, render_email

__all__ = [
    "LoggingEmailDispatcher",
    "RenderedEmail",
    "SendGridEmailDispatcher",
    "build_email_dispatcher",
    "render_email",
]
