"""Transactional email templates (subject + HTML) for the account lifecycle."""

from dataclasses import dataclass
from html import escape
from typing import Any

from app.application.interfaces.services import EmailTemplate

_LAYOUT = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>{title}</h2>
    {body}
    <hr style="border: none; border-top: 1px solid #ddd; margin: 20px 0;">
    <p style="color: #999; font-size: 11px; text-align: center;">{app_name}</p>
</div>
"""

_BUTTON = """
<p style="margin: 30px 0;">
    <a href="{url}"
       style="background-color: #667eea; color: white; padding: 12px 24px;
              text-decoration: none; border-radius: 4px;">
        {label}
    </a>
</p>
<p style="color: #666; font-size: 12px;">Or copy and paste this link in your browser:</p>
<p style="color: #666; font-size: 12px; word-break: break-all;">{url}</p>
"""


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def _button(url: str, label: str) -> str:
    return _BUTTON.format(url=escape(url, quote=True), label=escape(label))


def _approval_request(data: dict[str, Any]) -> tuple[str, str, str]:
    body = (
        "<p>A new organization signed up and is waiting for approval.</p>"
        f"<p><strong>Company:</strong> {escape(str(data['company_name']))}<br>"
        f"<strong>Email:</strong> {escape(str(data['email']))}<br>"
        f"<strong>Username:</strong> {escape(str(data['username']))}</p>"
        + _button(str(data["approve_url"]), "Approve account")
        + f"<p style=\"color: #666; font-size: 12px;\">This link expires in "
        f"{int(data.get('expires_minutes', 60))} minutes and can be used once.</p>"
    )
    subject = f"Approval needed: {data['company_name']}"
    return subject, "New account approval request", body


def _account_approved(data: dict[str, Any]) -> tuple[str, str, str]:
    body = (
        f"<p>Hello {escape(str(data['company_name']))},</p>"
        "<p>Your account has been approved. You can now sign in.</p>"
        + _button(str(data["login_url"]), "Sign in")
    )
    return "Your account has been approved", "Account approved", body


def _password_reset(data: dict[str, Any]) -> tuple[str, str, str]:
    body = (
        "<p>Hello,</p>"
        "<p>You requested to reset your password. Click the button below to choose a new one.</p>"
        + _button(str(data["reset_url"]), "Reset password")
        + f"<p style=\"color: #666; font-size: 12px;\">This link expires in "
        f"{int(data.get('expires_minutes', 60))} minutes.</p>"
        "<p style=\"color: #666; font-size: 12px;\">If you didn't request this, "
        "you can safely ignore this email.</p>"
    )
    return "Password reset request", "Password reset request", body


_RENDERERS = {
    EmailTemplate.APPROVAL_REQUEST: _approval_request,
    EmailTemplate.ACCOUNT_APPROVED: _account_approved,
    EmailTemplate.PASSWORD_RESET: _password_reset,
}


def render_email(
    template: EmailTemplate, data: dict[str, Any], app_name: str = "ATS"
) -> RenderedEmail:
    """Render a template. Raises KeyError when data lacks a required field."""
    subject, title, body = _RENDERERS[EmailTemplate(template)](data)
    html = _LAYOUT.format(title=escape(title), body=body, app_name=escape(app_name))
    return RenderedEmail(subject=f"{app_name} - {subject}", html=html)
