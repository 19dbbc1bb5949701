"""
Защита блоков кода ``` от разрешения тегов.

Перед резолверами содержимое каждого блока заменяется индексом,
дополненным тем же числом переводов строк (геометрия строк сохраняется
для карты исходников). После резолверов содержимое возвращается.
"""

from __future__ import annotations

import re
from typing import List, Mapping

from ..context import LiquidContext
from .substitutions import substitute_text

_FENCE = re.compile(r"```([\s\S]*?)```")


class CodeFences:
    """Реестр сохранённых блоков кода одного вызова."""

    def __init__(self):
        self.codes: List[str] = []

    def save(self, ctx: LiquidContext, text: str, scope: Mapping) -> str:
        """Заменяет блоки кода плейсхолдерами; подстановки внутри кода выполняются сразу."""

        def replace(match) -> str:
            code = match.group(1)
            breaks = "\n" * code.count("\n")
            if ctx.settings.substitutions:
                code = substitute_text(ctx, code, scope)
            self.codes.append(code)
            return f"```{len(self.codes) - 1}{breaks}```"

        return _FENCE.sub(replace, text)

    def restore(self, text: str) -> str:
        def replace(match) -> str:
            key = match.group(1).strip()
            if key.isdigit() and int(key) < len(self.codes):
                return f"```{self.codes[int(key)]}```"
            return match.group(0)

        return _FENCE.sub(replace, text)


__all__ = ["CodeFences"]
