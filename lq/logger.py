"""
Логгер диагностик шаблонизатора.

Резолверы сообщают о структурных нарушениях (незакрытые блоки,
непарные закрывающие теги, неитерируемые коллекции) через три метода:
info, warn и error. По умолчанию сообщения уходят в стандартный
logging под именем "lq".
"""

from __future__ import annotations

import logging
import os
from typing import List, Protocol, Tuple


class Logger(Protocol):
    """Минимальный контракт логгера."""

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class StdLogger:
    """
    Адаптер поверх logging.Logger.

    warn отображается на logging.WARNING.
    """

    def __init__(self, name: str = "lq"):
        self._log = logging.getLogger(name)

    def info(self, message: str) -> None:
        self._log.info(message)

    def warn(self, message: str) -> None:
        self._log.warning(message)

    def error(self, message: str) -> None:
        self._log.error(message)


class NullLogger:
    """Логгер, который ничего не выводит."""

    def info(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class RecordingLogger:
    """
    Логгер, накапливающий сообщения в памяти.

    Удобен для сбора диагностик при пакетной обработке и в тестах.
    """

    def __init__(self):
        self.records: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warn(self, message: str) -> None:
        self.records.append(("warn", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def messages(self, level: str) -> List[str]:
        return [msg for lvl, msg in self.records if lvl == level]

    @property
    def errors(self) -> List[str]:
        return self.messages("error")

    @property
    def warnings(self) -> List[str]:
        return self.messages("warn")


def setup_logging_once() -> None:
    """Подключает вывод логгера "lq" в stderr (однократно)."""
    if getattr(setup_logging_once, "_inited", False):
        return
    setup_logging_once._inited = True  # type: ignore[attr-defined]
    log = logging.getLogger("lq")
    log.setLevel(logging.DEBUG if os.environ.get("LQ_DEBUG") else logging.INFO)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


__all__ = ["Logger", "StdLogger", "NullLogger", "RecordingLogger", "setup_logging_once"]
