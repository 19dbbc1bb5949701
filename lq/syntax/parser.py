"""
Разбор выражений рекурсивным спуском.

Приоритет операторов (от слабого к сильному):

    or  <  and  <  сравнение (==, !=, <, >, <=, >=, contains)  <  фильтр "|"

Операнды: литералы (строки, числа, true/false/nil/null), выражения в скобках
и переменные с цепочкой доступа: ``.имя``, ``.0``, ``.метод(аргументы)``
и ``[выражение]``.
"""

from __future__ import annotations

from typing import List, Optional

from .lexer import ExpressionLexer, ExpressionSyntaxError, Token
from .model import (
    Accessor,
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

_CONSTANTS = {"true": True, "false": False, "nil": None, "null": None}

_LOGICAL = (("or", ExpressionType.OR), ("and", ExpressionType.AND))


class ExpressionParser:
    """Строит AST выражения из лексем ExpressionLexer."""

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._index = 0

    def parse(self, text: str) -> Expression:
        """
        Raises:
            ExpressionSyntaxError: Выражение пустое или не соответствует грамматике
        """
        self._tokens = self.lexer.tokenize(text)
        self._index = 0

        if self._peek().type == "EOF":
            raise ExpressionSyntaxError("Empty expression", 0)

        tree = self._logical(0)

        rest = self._peek()
        if rest.type != "EOF":
            raise ExpressionSyntaxError(f"Unexpected token '{rest.value}'", rest.position)
        return tree

    def _logical(self, level: int) -> Expression:
        # or и and разбираются одной функцией по уровням _LOGICAL
        if level == len(_LOGICAL):
            return self._comparison()
        keyword, kind = _LOGICAL[level]
        node = self._logical(level + 1)
        while self._accept("KEYWORD", keyword):
            node = BinaryExpression(left=node, right=self._logical(level + 1), operator=kind)
        return node

    def _comparison(self) -> Expression:
        node = self._filtered()
        token = self._peek()
        if token.type == "OPERATOR" or (token.type == "KEYWORD" and token.value == "contains"):
            self._index += 1
            return Comparison(left=node, operator=token.value, right=self._filtered())
        return node

    def _filtered(self) -> Expression:
        node = self._operand()
        while self._accept("SYMBOL", "|"):
            name = self._expect("IDENTIFIER", "Expected filter name after '|'")
            node = Filter(value=node, name=name.value)
        return node

    def _operand(self) -> Expression:
        token = self._peek()

        if token.type == "STRING":
            self._index += 1
            return Literal(token.value)
        if token.type == "NUMBER":
            self._index += 1
            return Literal(float(token.value) if "." in token.value else int(token.value))
        if token.type == "KEYWORD" and token.value in _CONSTANTS:
            self._index += 1
            return Literal(_CONSTANTS[token.value])
        if self._accept("SYMBOL", "("):
            inner = self._logical(0)
            self._expect("SYMBOL", "Expected ')' after grouped expression", ")")
            return GroupExpression(expression=inner)
        if token.type == "IDENTIFIER":
            self._index += 1
            return Variable(name=token.value, accessors=tuple(self._accessors()))

        if token.type == "EOF":
            raise ExpressionSyntaxError("Unexpected end of expression", token.position)
        raise ExpressionSyntaxError(f"Unexpected token '{token.value}'", token.position)

    def _accessors(self) -> List[Accessor]:
        chain: List[Accessor] = []
        while True:
            if self._accept("SYMBOL", "."):
                member = self._peek()
                if member.type not in ("IDENTIFIER", "KEYWORD", "NUMBER"):
                    raise ExpressionSyntaxError("Expected property name after '.'", member.position)
                self._index += 1
                if self._accept("SYMBOL", "("):
                    chain.append(MethodCall(name=member.value, args=self._call_arguments()))
                else:
                    chain.append(Attribute(name=member.value))
            elif self._accept("SYMBOL", "["):
                key = self._logical(0)
                self._expect("SYMBOL", "Expected ']' after subscript", "]")
                chain.append(Subscript(key=key))
            else:
                return chain

    def _call_arguments(self) -> List[Expression]:
        args: List[Expression] = []
        if self._accept("SYMBOL", ")"):
            return args
        while True:
            args.append(self._logical(0))
            if self._accept("SYMBOL", ")"):
                return args
            if not self._accept("SYMBOL", ","):
                raise ExpressionSyntaxError("Expected ',' or ')' in arguments", self._peek().position)

    # курсор по лексемам

    def _peek(self) -> Token:
        # за EOF курсор не выходит: последняя лексема всегда EOF
        return self._tokens[min(self._index, len(self._tokens) - 1)]

    def _accept(self, kind: str, value: Optional[str] = None) -> bool:
        token = self._peek()
        if token.type != kind or (value is not None and token.value != value):
            return False
        self._index += 1
        return True

    def _expect(self, kind: str, message: str, value: Optional[str] = None) -> Token:
        token = self._peek()
        if not self._accept(kind, value):
            raise ExpressionSyntaxError(message, token.position)
        return token
