"""
Приветственное письмо после подтверждения email.
"""
from pashumitra.core.config import EmailBranding
from pashumitra.integrations.email.templates.render import render
from pashumitra.integrations.email.types import Message, RecipientProfile

SUBJECT = "Welcome to {{app_name}}!"

HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Welcome to {{app_name}}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0;">
    <div style="max-width: 600px; margin: 0 auto; background: #ffffff;">
        <div style="background: linear-gradient(135deg, #4CAF50, #2E7D32); color: white; padding: 30px; text-align: center;">
            <h1 style="margin: 0; font-size: 28px;">Welcome to {{app_name}}!</h1>
        </div>
        <div style="padding: 30px;">
            <h2 style="color: #4CAF50; margin-top: 0;">Hello {{name}}!</h2>
            <p>Thank you for joining {{app_name}}, the livestock disease monitoring and management system.</p>
            <ul style="margin: 0; padding-left: 20px;">
                <li>Monitor your livestock health in real-time</li>
                <li>Receive instant alerts for health issues</li>
                <li>Connect with certified veterinarians</li>
                <li>Track health trends and analytics</li>
                <li>Manage medical records and documents</li>
            </ul>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{{dashboard_url}}"
                   style="background: #4CAF50; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">
                    Go to Dashboard
                </a>
            </div>
            <p>If you have any questions or need assistance, contact us at <a href="mailto:{{support_email}}">{{support_email}}</a>.</p>
            <p>Best regards,<br><strong>The {{app_name}} Team</strong></p>
        </div>
    </div>
</body>
</html>
"""

TEXT = """Welcome to {{app_name}}!

Hello {{name}}!

Thank you for joining {{app_name}}, the livestock disease monitoring and management system.

What you can do:
- Monitor your livestock health in real-time
- Receive instant alerts for health issues
- Connect with certified veterinarians
- Track health trends and analytics
- Manage medical records and documents

Visit your dashboard: {{dashboard_url}}

Best regards,
The {{app_name}} Team
"""


def build_welcome(profile: RecipientProfile, *, branding: EmailBranding) -> Message:
    """Собрать приветственное письмо."""
    vars = {
        "app_name": branding.app_name,
        "name": profile.name,
        "dashboard_url": f"{branding.frontend_base_url}/dashboard",
        "support_email": branding.support_email,
    }
    return Message(
        recipients=(profile.email,),
        subject=render(SUBJECT, vars),
        html_body=render(HTML, vars, escape=True),
        text_body=render(TEXT, vars),
    )
