"""
Подстановка значений {{ expr }}.

not_var{{ ... }} выводит фигурные скобки буквально, пути с ведущей
точкой не трогаются, нераспознанные выражения остаются в тексте с
предупреждением.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ..context import LiquidContext
from ..syntax.evaluate import NoValue, evaluate
from ..syntax.lexical import VARS, is_single_variable


def stringify(value: Any) -> str:
    """Строковое представление значения для вставки в текст."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def apply_substitutions(ctx: LiquidContext, text: str, scope: Mapping) -> Any:
    """
    Подставляет значения выражений.

    Если весь текст состоит из одной подстановки, возвращается само значение
    (без приведения к строке).
    """
    if is_single_variable(text):
        expression = text.strip()[2:-2].strip()
        if expression.startswith("."):
            return text
        value = evaluate(ctx, expression, scope, strict=True)
        if value is NoValue:
            ctx.logger.warn(f"Variable {expression} not found{ctx.where()}")
            return text
        return value

    return substitute_text(ctx, text, scope)


def substitute_text(ctx: LiquidContext, text: str, scope: Mapping) -> str:
    """Заменяет все вхождения {{ ... }} строковыми значениями."""

    def replace(match) -> str:
        whole, not_var, braces, expression = match.group(1, 2, 3, 4)
        if not_var:
            return whole if ctx.settings.keep_not_var else braces

        expression = expression.strip()
        if expression.startswith("."):
            return braces

        value = evaluate(ctx, expression, scope, strict=True)
        if value is NoValue:
            ctx.logger.warn(f"Variable {expression} not found{ctx.where()}")
            return whole
        return stringify(value)

    return VARS.sub(replace, text)


__all__ = ["apply_substitutions", "substitute_text", "stringify"]
