from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import LiquidSettings
from .logger import Logger, StdLogger


@dataclass(frozen=True)
class LiquidContext:
    """
    Неизменяемый контекст вызова шаблонизатора.

    Передаётся во все резолверы, включая рекурсивные вызовы при
    раскрытии циклов.
    """
    settings: LiquidSettings = field(default_factory=LiquidSettings)
    logger: Logger = field(default_factory=StdLogger)
    # путь к обрабатываемому файлу (для сообщений)
    path: Optional[str] = None

    def where(self) -> str:
        """Суффикс для диагностик: ' in <path>' или пустая строка."""
        return f" in {self.path}" if self.path else ""


def create_context(
    logger: Optional[Logger] = None,
    settings: LiquidSettings | Dict[str, Any] | None = None,
    path: Optional[str] = None,
) -> LiquidContext:
    """Собирает контекст; settings можно передать словарём."""
    if not isinstance(settings, LiquidSettings):
        settings = LiquidSettings.from_dict(settings)
    return LiquidContext(
        settings=settings,
        logger=logger if logger is not None else StdLogger(),
        path=path,
    )


__all__ = ["LiquidContext", "create_context"]
