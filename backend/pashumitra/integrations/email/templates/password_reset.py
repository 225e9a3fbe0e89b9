"""
Письмо сброса пароля (ссылка /reset-password?token=...).
"""
from pashumitra.core.config import EmailBranding
from pashumitra.integrations.email.templates.render import render
from pashumitra.integrations.email.types import Message, RecipientProfile

SUBJECT = "Password Reset Request - {{app_name}}"

HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Password Reset - {{app_name}}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <h2>Password Reset Request</h2>
    <p>Hello {{name}},</p>
    <p>You are receiving this email because you (or someone else) requested a password reset for your {{app_name}} account.</p>
    <p>Please click the button below to reset your password:</p>
    <div style="text-align: center; margin: 20px 0;">
        <a href="{{reset_url}}" style="background-color: #f44336; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px; display: inline-block;">
            Reset Password
        </a>
    </div>
    <p>Or copy and paste this link in your browser:</p>
    <p><a href="{{reset_url}}">{{reset_url}}</a></p>
    <p>This link will expire in {{expiry_minutes}} minutes.</p>
    <p>If you didn't request a password reset, please ignore this email and your password will remain unchanged.</p>
    <p>Best regards,<br>The {{app_name}} Team</p>
</body>
</html>
"""

TEXT = """Password Reset Request

Hello {{name}},

You are receiving this email because you (or someone else) requested a password reset for your {{app_name}} account.

Reset your password: {{reset_url}}

This link will expire in {{expiry_minutes}} minutes.

If you didn't request a password reset, please ignore this email and your password will remain unchanged.
"""


def reset_url(branding: EmailBranding, token: str) -> str:
    return f"{branding.frontend_base_url}/reset-password?token={token}"


def build_password_reset(
    profile: RecipientProfile,
    token: str,
    *,
    branding: EmailBranding,
    expiry_minutes: int = 10,
) -> Message:
    """Собрать письмо со ссылкой сброса пароля."""
    vars = {
        "app_name": branding.app_name,
        "name": profile.name,
        "reset_url": reset_url(branding, token),
        "expiry_minutes": expiry_minutes,
    }
    return Message(
        recipients=(profile.email,),
        subject=render(SUBJECT, vars),
        html_body=render(HTML, vars, escape=True),
        text_body=render(TEXT, vars),
    )
