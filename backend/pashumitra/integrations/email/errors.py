"""
Ошибки отправки email.

Все они перехватываются на границе адаптера (EmailSender.send) и превращаются
в DeliveryResult(success=False); выше адаптера их ловить не нужно.
Исключение: неизвестный EMAIL_SERVICE — EmailConfigurationError при старте.
"""


class EmailError(Exception):
    """Базовая ошибка email-интеграции."""


class EmailValidationError(EmailError):
    """Письмо некорректно (нет получателя, темы или HTML). В провайдер не отправляется."""


class EmailConfigurationError(EmailError):
    """Провайдер не настроен (нет ключей) или выбран неизвестный сервис."""


class EmailTransportError(EmailError):
    """Провайдер отклонил запрос или не удалось выполнить сетевой вызов."""
