"""
Шаблоны писем: ссылки с токеном, срок действия, экранирование в HTML.
"""
import pytest

from pashumitra.integrations.email import Message, RecipientProfile
from pashumitra.integrations.email.errors import EmailValidationError
from pashumitra.integrations.email.templates import (
    build_password_reset,
    build_verification,
    build_welcome,
)
from pashumitra.integrations.email.templates.render import render


@pytest.fixture
def profile() -> RecipientProfile:
    return RecipientProfile(name="Test User", email="test@example.com")


def test_verification_contains_link_and_expiry(profile, branding) -> None:
    message = build_verification(profile, "tok123", branding=branding)

    assert message.recipients == ("test@example.com",)
    assert message.subject == "Verify Your Email - PashuMitra Portal"
    link = "http://localhost:3000/verify-email?token=tok123"
    assert link in message.html_body
    assert link in message.text_body
    assert "Hello Test User!" in message.html_body
    assert "expire in 24 hours" in message.text_body
    assert "support@pashumitra.in" in message.html_body


def test_password_reset_link_and_custom_expiry(profile, branding) -> None:
    message = build_password_reset(profile, "tok456", branding=branding, expiry_minutes=30)

    assert message.subject == "Password Reset Request - PashuMitra Portal"
    assert "http://localhost:3000/reset-password?token=tok456" in message.html_body
    assert "http://localhost:3000/reset-password?token=tok456" in message.text_body
    assert "30 minutes" in message.text_body


def test_welcome_escapes_html_but_not_text(branding) -> None:
    profile = RecipientProfile(name="<b>Ravi</b> & Co", email="ravi@pashumitra.in")
    message = build_welcome(profile, branding=branding)

    assert message.subject == "Welcome to PashuMitra Portal!"
    assert "&lt;b&gt;Ravi&lt;/b&gt; &amp; Co" in message.html_body
    assert "<b>Ravi</b>" not in message.html_body
    assert "Hello <b>Ravi</b> & Co!" in message.text_body
    assert "http://localhost:3000/dashboard" in message.html_body


def test_built_messages_are_sendable(profile, branding) -> None:
    for message in (
        build_verification(profile, "t", branding=branding),
        build_password_reset(profile, "t", branding=branding),
        build_welcome(profile, branding=branding),
    ):
        message.validate_for_sending()


def test_render_missing_placeholder_raises() -> None:
    with pytest.raises(ValueError, match="name"):
        render("Hello {{name}}", {})


def test_message_normalizes_recipients() -> None:
    message = Message(
        recipients=["a@pashumitra.in", " b@pashumitra.in ", "a@pashumitra.in", ""],
        subject="s",
        html_body="<p>x</p>",
    )
    assert message.recipients == ("a@pashumitra.in", "b@pashumitra.in")
    assert Message(recipients="a@pashumitra.in").recipients == ("a@pashumitra.in",)


def test_empty_message_lists_missing_fields() -> None:
    with pytest.raises(EmailValidationError) as exc_info:
        Message(subject="  ").validate_for_sending()
    assert str(exc_info.value) == "Missing required email parameters: to, subject, html"
