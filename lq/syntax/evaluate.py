"""
Вычислитель выражений.

Проходит по AST выражения и вычисляет его значение в области видимости
переменных. В строгом режиме отсутствующая переменная даёт NoValue, и
этот маркер поглощает сравнения и фильтры, в которых участвует.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Tuple, cast

from .lexer import ExpressionSyntaxError
from .model import (
    Attribute,
    BinaryExpression,
    Comparison,
    Expression,
    ExpressionType,
    Filter,
    GroupExpression,
    Literal,
    MethodCall,
    Subscript,
    Variable,
)
from .parser import ExpressionParser

_log = logging.getLogger(__name__)


class _NoValueType:
    """Маркер «переменная не определена» строгого режима."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NoValue"

    def __bool__(self) -> bool:
        return False


NoValue = _NoValueType()


class SkippedEvalError(Exception):
    """Выражение содержит неподдерживаемую конструкцию."""

    def __init__(self, message: str, expression: str):
        self.message = message
        self.expression = expression
        super().__init__(f"{message}: {expression}")


def is_truthy(value: Any) -> bool:
    """
    Истинность значения в условиях.

    Ложны: None, False, пустая строка, числовой ноль и NoValue.
    Пустые списки и словари истинны.
    """
    if value is None or value is NoValue or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def _escape_markdown(value: Any) -> str:
    return re.sub(r"([\\`*_{}\[\]()#+\-.!|<>~])", r"\\\1", str(value))


def _capitalize(value: Any) -> str:
    text = str(value)
    return text[:1].upper() + text[1:]


def _length(value: Any) -> int:
    try:
        return len(value)
    except TypeError:
        return 0


FILTERS: Dict[str, Callable[[Any], Any]] = {
    "length": _length,
    "capitalize": _capitalize,
    "escapeMarkdown": _escape_markdown,
}


def _slice(value: Any, start: int = 0, end: int | None = None) -> Any:
    if not isinstance(value, (str, list, tuple)):
        raise TypeError(f"slice is not supported for {type(value).__name__}")
    return value[start:end]


METHODS: Dict[str, Callable[..., Any]] = {
    "slice": _slice,
}


class ExpressionEvaluator:
    """
    Вычислитель выражений.

    Принимает AST и область видимости, возвращает значение выражения.
    """

    def __init__(self, scope: Mapping, *, strict: bool = False):
        """
        Args:
            scope: Переменные (любой Mapping, в том числе ChainMap)
            strict: Отсутствующие переменные дают NoValue вместо None
        """
        self.scope = scope
        self.strict = strict

    def evaluate(self, node: Expression) -> Any:
        node_type = node.get_type()

        if node_type == ExpressionType.LITERAL:
            return cast(Literal, node).value
        elif node_type == ExpressionType.VARIABLE:
            return self._evaluate_variable(cast(Variable, node))
        elif node_type == ExpressionType.GROUP:
            return self.evaluate(cast(GroupExpression, node).expression)
        elif node_type == ExpressionType.COMPARISON:
            return self._evaluate_comparison(cast(Comparison, node))
        elif node_type == ExpressionType.FILTER:
            return self._evaluate_filter(cast(Filter, node))
        elif node_type == ExpressionType.AND:
            return self._evaluate_and(cast(BinaryExpression, node))
        elif node_type == ExpressionType.OR:
            return self._evaluate_or(cast(BinaryExpression, node))
        else:
            raise SkippedEvalError(f"Unknown expression type {node_type}", str(node))

    def _missing(self) -> Any:
        return NoValue if self.strict else None

    def _evaluate_variable(self, node: Variable) -> Any:
        if node.name not in self.scope:
            return self._missing()
        value = self.scope[node.name]

        for accessor in node.accessors:
            if isinstance(accessor, MethodCall):
                method = METHODS.get(accessor.name)
                if method is None:
                    raise SkippedEvalError(f"Unsupported method '{accessor.name}'", str(node))
                args = [self.evaluate(arg) for arg in accessor.args]
                try:
                    value = method(value, *args)
                except TypeError as e:
                    raise SkippedEvalError(str(e), str(node)) from e
                continue

            if isinstance(accessor, Attribute):
                key: Any = accessor.name
            else:
                key = self.evaluate(cast(Subscript, accessor).key)
                if key is NoValue:
                    return NoValue

            found, value = _lookup(value, key)
            if not found:
                return self._missing()

        return value

    def _evaluate_comparison(self, node: Comparison) -> Any:
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        if left is NoValue or right is NoValue:
            return NoValue

        op = node.operator
        if op == "==":
            return left == right
        if op == "!=":
            return left != right
        if op == "contains":
            return _contains(left, right)
        try:
            if op == "<":
                return left < right
            if op == ">":
                return left > right
            if op == "<=":
                return left <= right
            if op == ">=":
                return left >= right
        except TypeError:
            return False
        raise SkippedEvalError(f"Unknown operator '{op}'", str(node))

    def _evaluate_filter(self, node: Filter) -> Any:
        fn = FILTERS.get(node.name)
        if fn is None:
            raise SkippedEvalError(f"Unsupported filter '{node.name}'", str(node))
        value = self.evaluate(node.value)
        if value is NoValue:
            return NoValue
        return fn(value)

    def _evaluate_and(self, node: BinaryExpression) -> Any:
        left = self.evaluate(node.left)
        if left is NoValue:
            return NoValue
        if not is_truthy(left):
            return False  # Короткое вычисление
        right = self.evaluate(node.right)
        if right is NoValue:
            return NoValue
        return is_truthy(right)

    def _evaluate_or(self, node: BinaryExpression) -> Any:
        left = self.evaluate(node.left)
        if left is NoValue:
            return NoValue
        if is_truthy(left):
            return True  # Короткое вычисление
        right = self.evaluate(node.right)
        if right is NoValue:
            return NoValue
        return is_truthy(right)


def _lookup(value: Any, key: Any) -> Tuple[bool, Any]:
    if isinstance(value, Mapping):
        if key in value:
            return True, value[key]
        return False, None
    if isinstance(value, (list, tuple, str)):
        if isinstance(key, str) and re.fullmatch(r"-?\d+", key):
            key = int(key)
        if isinstance(key, int) and not isinstance(key, bool) and -len(value) <= key < len(value):
            return True, value[key]
    return False, None


def _contains(container: Any, item: Any) -> bool:
    if isinstance(container, str):
        return isinstance(item, str) and item in container
    if isinstance(container, (Mapping, Sequence, set, frozenset)):
        return item in container
    return False


def evaluate(ctx, expression: str, scope: Mapping, strict: bool = False) -> Any:
    """
    Вычисляет выражение из строки.

    Ошибки синтаксиса и неподдерживаемые конструкции не пробрасываются:
    они пишутся в ctx.logger.warn, а результатом становится NoValue
    (строгий режим) или None.

    Args:
        ctx: LiquidContext (используется логгер и путь)
        expression: Строка выражения
        scope: Переменные
        strict: Строгий режим

    Returns:
        Значение выражения
    """
    try:
        ast = ExpressionParser().parse(expression)
        return ExpressionEvaluator(scope, strict=strict).evaluate(ast)
    except ExpressionSyntaxError as e:
        ctx.logger.warn(f"Cannot parse expression '{expression.strip()}': {e.message}{ctx.where()}")
    except SkippedEvalError as e:
        ctx.logger.warn(f"Skipped evaluation of '{expression.strip()}': {e.message}{ctx.where()}")
    _log.debug("evaluation of %r failed", expression)
    return NoValue if strict else None


__all__ = [
    "NoValue",
    "SkippedEvalError",
    "ExpressionEvaluator",
    "FILTERS",
    "METHODS",
    "evaluate",
    "is_truthy",
]
