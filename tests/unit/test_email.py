"""Unit tests for email templates and dispatchers."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from app.application.interfaces.services import EmailTemplate
from app.core.config import Settings
from app.infrastructure.external.email import dispatcher as dispatcher_module
from app.infrastructure.external.email.dispatcher import (
    LoggingEmailDispatcher,
    SendGridEmailDispatcher,
    build_email_dispatcher,
)
from app.infrastructure.external.email.templates import render_email

APPROVAL_DATA = {
    "company_name": "Globex <Inc>",
    "email": "hr@globex.test",
    "username": "globex",
    "approve_url": "https://api.example.test/api/v1/auth/approve-by-token?token=abc&x=1",
    "expires_minutes": 60,
}


def test_approval_request_escapes_user_input() -> None:
    email = render_email(EmailTemplate.APPROVAL_REQUEST, APPROVAL_DATA, "ATS")
    assert email.subject == "ATS - Approval needed: Globex <Inc>"
    assert "Globex &lt;Inc&gt;" in email.html
    assert "<Inc>" not in email.html
    assert "token=abc&amp;x=1" in email.html
    assert "60 minutes" in email.html


def test_account_approved_and_password_reset_templates() -> None:
    approved = render_email(
        EmailTemplate.ACCOUNT_APPROVED,
        {"company_name": "Globex", "login_url": "https://app.example.test/login"},
    )
    assert "approved" in approved.subject.lower()
    assert "https://app.example.test/login" in approved.html

    reset = render_email(
        "password_reset",
        {"reset_url": "https://app.example.test/reset-password?token=t", "expires_minutes": 30},
    )
    assert "30 minutes" in reset.html


def test_missing_template_data_raises_key_error() -> None:
    with pytest.raises(KeyError):
        render_email(EmailTemplate.PASSWORD_RESET, {})


async def test_logging_dispatcher_reports_success(caplog) -> None:
    dispatcher = LoggingEmailDispatcher(app_name="ATS")
    with caplog.at_level(logging.INFO):
        assert await dispatcher.dispatch("a@b.test", EmailTemplate.APPROVAL_REQUEST, APPROVAL_DATA)
    assert any("[EMAIL MOCK]" in r.getMessage() for r in caplog.records)


async def test_logging_dispatcher_render_failure_returns_false() -> None:
    dispatcher = LoggingEmailDispatcher()
    assert await dispatcher.dispatch("a@b.test", EmailTemplate.PASSWORD_RESET, {}) is False


async def test_sendgrid_dispatcher_sends_rendered_mail() -> None:
    client = MagicMock()
    with patch.object(dispatcher_module, "SendGridAPIClient", return_value=client) as factory:
        dispatcher = SendGridEmailDispatcher("SG.key", "no-reply@ats.test", app_name="ATS")
        ok = await dispatcher.dispatch(
            "ops@platform.test", EmailTemplate.APPROVAL_REQUEST, APPROVAL_DATA
        )
    assert ok is True
    factory.assert_called_once_with("SG.key")
    client.send.assert_called_once()


async def test_sendgrid_failure_is_logged_not_raised(caplog) -> None:
    client = MagicMock()
    client.send.side_effect = RuntimeError("503 from provider")
    with patch.object(dispatcher_module, "SendGridAPIClient", return_value=client):
        dispatcher = SendGridEmailDispatcher("SG.key", "no-reply@ats.test")
        with caplog.at_level(logging.ERROR):
            ok = await dispatcher.dispatch(
                "ops@platform.test", EmailTemplate.APPROVAL_REQUEST, APPROVAL_DATA
            )
    assert ok is False
    assert any(r.exc_info for r in caplog.records)


def test_build_dispatcher_follows_provider_setting() -> None:
    assert isinstance(build_email_dispatcher(Settings(email_provider="log")), LoggingEmailDispatcher)
    sendgrid = build_email_dispatcher(
        Settings(email_provider="sendgrid", sendgrid_api_key="SG.key", email_from="x@ats.test")
    )
    assert isinstance(sendgrid, SendGridEmailDispatcher)
    assert sendgrid.from_email == "x@ats.test"
