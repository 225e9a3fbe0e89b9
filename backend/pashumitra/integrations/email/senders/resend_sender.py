"""
Отправка email через Resend REST API (POST /emails).
"""
from typing import Any

import httpx

from pashumitra.core.config import EmailProviderConfig
from pashumitra.integrations.email.errors import EmailTransportError
from pashumitra.integrations.email.ports import EmailSender, require_message_id
from pashumitra.integrations.email.types import Message


class ResendEmailSender(EmailSender):
    """Отправка писем через Resend."""

    service = "resend"
    display_name = "Resend"

    def __init__(self, config: EmailProviderConfig, http_client: httpx.AsyncClient) -> None:
        super().__init__(config)
        self._client = http_client

    def is_configured(self) -> bool:
        return self._config.resend_configured

    def build_payload(self, message: Message) -> dict[str, Any]:
        """Тело запроса Resend: from, to[], subject, html и text, если есть."""
        payload: dict[str, Any] = {
            "from": self._config.sender,
            "to": list(message.recipients),
            "subject": message.subject,
            "html": message.html_body,
        }
        if message.text_body:
            payload["text"] = message.text_body
        return payload

    async def _deliver(self, message: Message) -> str:
        url = f"{self._config.resend_base_url}/emails"
        headers = {
            "Authorization": f"Bearer {self._config.resend_api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._client.post(
                url,
                json=self.build_payload(message),
                headers=headers,
                timeout=self._config.timeout_s,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmailTransportError(_describe_error(e.response)) from e
        except httpx.RequestError as e:
            raise EmailTransportError(f"Resend request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise EmailTransportError("Resend returned a non-JSON response") from e
        return require_message_id("Resend", data.get("id") if isinstance(data, dict) else None)


def _describe_error(response: httpx.Response) -> str:
    """Resend отдаёт ошибки как {"name", "message", "statusCode"}; собираем в одну строку."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        name = body.get("name") or "error"
        return f"Resend HTTP {response.status_code} ({name}): {body['message']}"
    return f"Resend HTTP {response.status_code}"
