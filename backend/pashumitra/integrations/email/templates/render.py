"""
Простая подстановка переменных {{var}} в шаблонах писем.
Для HTML-шаблонов значения экранируются.
"""
import html
import re
from typing import Any

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render(template: str, vars: dict[str, Any], *, escape: bool = False) -> str:
    """
    Подставить в template значения из vars для плейсхолдеров {{key}}.

    Отсутствующий ключ даёт ValueError. Нестроковые значения приводятся к str(value).
    При escape=True значения проходят через html.escape (для HTML-тела письма).
    """

    def repl(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in vars:
            raise ValueError(f"Missing placeholder value: {key!r}")
        value = str(vars[key])
        return html.escape(value, quote=True) if escape else value

    return _PLACEHOLDER.sub(repl, template)
