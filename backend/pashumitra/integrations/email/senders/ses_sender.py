"""
Отправка email через AWS SES (aioboto3, API SendEmail).
"""
from typing import Any

import aioboto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from pashumitra.core.config import EmailProviderConfig
from pashumitra.integrations.email.errors import EmailTransportError
from pashumitra.integrations.email.ports import EmailSender, require_message_id
from pashumitra.integrations.email.types import Message

CHARSET = "UTF-8"


class SESEmailSender(EmailSender):
    """Отправка писем через AWS SES."""

    service = "ses"
    display_name = "AWS SES"

    def __init__(self, config: EmailProviderConfig, session: aioboto3.Session | None = None) -> None:
        super().__init__(config)
        self._session = session
        self._boto_config = BotoConfig(
            connect_timeout=config.timeout_s,
            read_timeout=config.timeout_s,
            retries={"max_attempts": 1},
        )

    def is_configured(self) -> bool:
        return self._config.ses_configured

    def _get_session(self) -> aioboto3.Session:
        # Сессия создаётся лениво: без ключей SES не трогаем
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self._config.aws_access_key_id.get_secret_value(),
                aws_secret_access_key=self._config.aws_secret_access_key.get_secret_value(),
                region_name=self._config.aws_region,
            )
        return self._session

    def build_request(self, message: Message) -> dict[str, Any]:
        """Параметры SendEmail: Source, Destination, Message (Subject + Html/Text)."""
        body: dict[str, Any] = {"Html": {"Data": message.html_body, "Charset": CHARSET}}
        if message.text_body:
            body["Text"] = {"Data": message.text_body, "Charset": CHARSET}
        return {
            "Source": self._config.sender,
            "Destination": {"ToAddresses": list(message.recipients)},
            "Message": {
                "Subject": {"Data": message.subject, "Charset": CHARSET},
                "Body": body,
            },
        }

    async def _deliver(self, message: Message) -> str:
        try:
            async with self._get_session().client("ses", config=self._boto_config) as client:
                response = await client.send_email(**self.build_request(message))
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "ClientError")
            detail = error.get("Message", str(e))
            raise EmailTransportError(f"AWS SES {code}: {detail}") from e
        except BotoCoreError as e:
            raise EmailTransportError(f"AWS SES request failed: {e}") from e
        return require_message_id("AWS SES", response.get("MessageId"))
