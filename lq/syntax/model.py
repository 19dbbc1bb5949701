"""
Модели данных для выражений в тегах.

Узлы абстрактного синтаксического дерева выражений условий и подстановок.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple, Union


class ExpressionType(Enum):
    """Типы узлов выражения."""
    LITERAL = "literal"
    VARIABLE = "variable"
    COMPARISON = "comparison"
    FILTER = "filter"
    AND = "and"
    OR = "or"
    GROUP = "group"


@dataclass
class Expression(ABC):
    """Базовый абстрактный класс для всех узлов выражения."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        """Возвращает тип узла."""
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class Literal(Expression):
    """Строка, число, true/false или nil."""
    value: Any

    def get_type(self) -> ExpressionType:
        return ExpressionType.LITERAL

    def _to_string(self) -> str:
        if isinstance(self.value, str):
            return f'"{self.value}"'
        if self.value is None:
            return "nil"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)


# ---- Сегменты пути к переменной ----

@dataclass
class Attribute:
    """.name"""
    name: str

    def __str__(self) -> str:
        return f".{self.name}"


@dataclass
class Subscript:
    """[key]: ключ может быть литералом или переменной."""
    key: Expression

    def __str__(self) -> str:
        return f"[{self.key}]"


@dataclass
class MethodCall:
    """.name(args): только из фиксированного списка методов."""
    name: str
    args: List[Expression] = field(default_factory=list)

    def __str__(self) -> str:
        return f".{self.name}({', '.join(str(a) for a in self.args)})"


Accessor = Union[Attribute, Subscript, MethodCall]


@dataclass
class Variable(Expression):
    """
    Путь к переменной: user.name, items[0], title.slice(1, 2)
    """
    name: str
    accessors: Tuple[Accessor, ...] = ()

    def get_type(self) -> ExpressionType:
        return ExpressionType.VARIABLE

    def _to_string(self) -> str:
        return self.name + "".join(str(a) for a in self.accessors)


@dataclass
class Comparison(Expression):
    """left <op> right, где op ∈ {==, !=, <, >, <=, >=, contains}"""
    left: Expression
    operator: str
    right: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.COMPARISON

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class Filter(Expression):
    """value | filter"""
    value: Expression
    name: str

    def get_type(self) -> ExpressionType:
        return ExpressionType.FILTER

    def _to_string(self) -> str:
        return f"{self.value} | {self.name}"


@dataclass
class BinaryExpression(Expression):
    """left and/or right"""
    left: Expression
    right: Expression
    operator: ExpressionType  # AND или OR

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        return f"{self.left} {self.operator.value} {self.right}"


@dataclass
class GroupExpression(Expression):
    """( expression )"""
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"
