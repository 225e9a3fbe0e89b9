"""
Письмо подтверждения email (ссылка /verify-email?token=...).
"""
from pashumitra.core.config import EmailBranding
from pashumitra.integrations.email.templates.render import render
from pashumitra.integrations.email.types import Message, RecipientProfile

SUBJECT = "Verify Your Email - {{app_name}}"

HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Email Verification - {{app_name}}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0;">
    <div style="max-width: 600px; margin: 0 auto; background: #ffffff;">
        <div style="background: #4CAF50; color: white; padding: 20px; text-align: center;">
            <h2 style="margin: 0;">Email Verification Required</h2>
        </div>
        <div style="padding: 30px;">
            <h3>Hello {{name}}!</h3>
            <p>Thank you for registering with {{app_name}}. To complete your registration and secure your account, please verify your email address.</p>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{{verification_url}}"
                   style="background: #4CAF50; color: white; padding: 15px 25px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">
                    Verify Email Address
                </a>
            </div>
            <p>If the button doesn't work, please copy and paste this link into your browser:</p>
            <p style="background: #f5f5f5; padding: 10px; border-radius: 5px; word-break: break-all; font-family: monospace;">{{verification_url}}</p>
            <p><strong>Important:</strong> This verification link will expire in {{expiry_hours}} hours for security reasons.</p>
            <p>If you didn't create an account with {{app_name}}, please ignore this email.</p>
            <p>Need help? Contact our support team at <a href="mailto:{{support_email}}">{{support_email}}</a></p>
        </div>
    </div>
</body>
</html>
"""

TEXT = """Email Verification Required

Hello {{name}}!

Thank you for registering with {{app_name}}. To complete your registration and secure your account, please verify your email address.

Click here to verify: {{verification_url}}

This verification link will expire in {{expiry_hours}} hours for security reasons.

If you didn't create this account, please ignore this email.
"""


def verification_url(branding: EmailBranding, token: str) -> str:
    return f"{branding.frontend_base_url}/verify-email?token={token}"


def build_verification(
    profile: RecipientProfile,
    token: str,
    *,
    branding: EmailBranding,
    expiry_hours: int = 24,
) -> Message:
    """Собрать письмо со ссылкой подтверждения email."""
    vars = {
        "app_name": branding.app_name,
        "name": profile.name,
        "verification_url": verification_url(branding, token),
        "expiry_hours": expiry_hours,
        "support_email": branding.support_email,
    }
    return Message(
        recipients=(profile.email,),
        subject=render(SUBJECT, vars),
        html_body=render(HTML, vars, escape=True),
        text_body=render(TEXT, vars),
    )
