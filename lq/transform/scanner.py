"""
Лексический сканер тегов {% ... %}.

Ищет теги одним регулярным выражением на семейство конструкций и
классифицирует тело тега на ключевое слово и аргументы. Позиция
сканера изменяема: резолвер, переписавший фрагмент текста, подменяет
текст и переставляет курсор, и сканирование продолжается с этого места.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Pattern, Sequence, Tuple

from ..syntax.lexical import TAG_LINE

# Теги условий вместе с одним соседним переводом строки с каждой стороны
CONDITION_TAG = re.compile(
    r"(?P<raw>(?:\r?\n[\t ]*)?\{%-?(?P<body>[\s\S]*?)-?%\}(?:[\t ]*\r?\n)?)"
)

# Открывающий тег цикла забирает следующий перевод строки, а закрывающий забирает предыдущий
CYCLE_TAG = re.compile(
    r"\{%-?(?P<for>\s*for[^}]+?)-?%\}\n?|\n?\{%-?(?P<endfor>\s*endfor[^}]+?)-?%\}"
)


@dataclass(frozen=True)
class TagMatch:
    """
    Найденный тег.

    raw включает захваченные соседние переводы строк.
    """
    start: int
    end: int
    raw: str
    keyword: str
    args: str


def classify(body: str) -> Optional[Tuple[str, str]]:
    """Разбирает тело тега на (ключевое слово, аргументы)."""
    match = TAG_LINE.match(body.strip())
    if not match:
        return None
    return match.group(1), match.group(2).strip()


class TagScanner:
    """
    Итератор по тегам текста с изменяемой позицией.

    Usage:
        scanner = TagScanner(CONDITION_TAG, text)
        for tag in scanner:
            ...
            scanner.text = new_text
            scanner.position = resume_at
    """

    def __init__(self, pattern: Pattern[str], text: str, body_groups: Sequence[str] = ("body",)):
        self.pattern = pattern
        self.text = text
        self.position = 0
        self.body_groups = tuple(body_groups)

    def __iter__(self) -> Iterator[TagMatch]:
        while True:
            match = self.pattern.search(self.text, self.position)
            if match is None:
                return
            self.position = match.end()

            body = next((match.group(g) for g in self.body_groups if match.group(g) is not None), None)
            parsed = classify(body) if body is not None else None
            if parsed is None:
                continue

            keyword, args = parsed
            yield TagMatch(
                start=match.start(),
                end=match.end(),
                raw=match.group(0),
                keyword=keyword,
                args=args,
            )

    def rewind(self, count: int) -> None:
        """Отступает на count символов назад (возврат захваченного перевода строки)."""
        self.position -= count


__all__ = ["TagMatch", "TagScanner", "CONDITION_TAG", "CYCLE_TAG", "classify"]
