"""
Общие правила обрезки пробелов и переводов строк вокруг тегов.
"""

from __future__ import annotations

import re

_HEAD_LINEBREAK = re.compile(r"^([^{]+)\{.*")
_TAIL_LINEBREAK = re.compile(r".*\}(\s*\n)\Z")


def head_linebreak(raw: str) -> str:
    """Захваченный перед '{%' перевод строки с отступом ('' если нет)."""
    match = _HEAD_LINEBREAK.match(raw)
    return match.group(1) if match else ""


def tail_linebreak(raw: str) -> str:
    """Захваченный после '%}' перевод строки ('' если нет)."""
    match = _TAIL_LINEBREAK.search(raw)
    return match.group(1) if match else ""


def remove_indent_block(text: str) -> str:
    """Убирает хвостовые пробелы, только если перед ними перевод строки."""
    index = len(text) - 1
    while index >= 0 and text[index] == " ":
        index -= 1
    if index >= 0 and text[index] == "\n":
        return text[:index + 1]
    return text


def prepared_left_content(content: str, start: int, result: str) -> str:
    """Текст до блока; при пустом результате без отступа последней строки."""
    left = content[:start]
    return remove_indent_block(left) if result == "" else left


def consumed_newline(left: str, content: str, position: int, result: str) -> int:
    """
    1, если пустой результат оставил бы двойной перевод строки
    (слева текст заканчивается '\\n' и справа начинается с '\\n').
    """
    if result == "" and left.endswith("\n") and content[position:position + 1] == "\n":
        return 1
    return 0


__all__ = [
    "head_linebreak",
    "tail_linebreak",
    "remove_indent_block",
    "prepared_left_content",
    "consumed_newline",
]
