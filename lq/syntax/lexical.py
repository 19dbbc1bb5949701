"""
Лексические шаблоны языка тегов.

Общие регулярные выражения для классификации тегов и распознавания
путей к переменным.
"""

from __future__ import annotations

import re

QUOTED = r"(?:'[^']*'|\"[^\"]*\")"
IDENTIFIER = r"[\w\-|]+\??"
SUBSCRIPT = r"\[(?:" + QUOTED + r"|[\w\-.]+)\]"
VARIABLE = IDENTIFIER + r"(?:\." + IDENTIFIER + r"|" + SUBSCRIPT + r")*"

# тело тега: ключевое слово и аргументы
TAG_LINE = re.compile(r"^\s*(" + IDENTIFIER + r")\s*([\s\S]*)\s*$")

# name in collection.path
FOR_SYNTAX = re.compile(r"(\w+)\s+in\s+(" + VARIABLE + r")")

VARS_CONTENT = r"[.\w\-|(),'=\":\[\]+*/%<>!~@\s]+"
# (not_var)?{{ expression }}
VARS = re.compile(r"((not_var)?(\{\{(" + VARS_CONTENT + r")\}\}))")

_SINGLE_VARIABLE = re.compile(r"\{\{" + VARS_CONTENT + r"\}\}\Z")


def is_single_variable(text: str) -> bool:
    """Весь текст состоит из одной подстановки {{ ... }}."""
    return _SINGLE_VARIABLE.match(text) is not None


__all__ = [
    "TAG_LINE",
    "FOR_SYNTAX",
    "VARS",
    "VARIABLE",
    "is_single_variable",
]
