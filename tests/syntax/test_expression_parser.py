"""
Tests for the expression parser.
"""

import pytest

from lq.syntax.lexer import ExpressionSyntaxError
from lq.syntax.model import (
    Attribute,
    BinaryExpression,
    Comparison,
    ExpressionType,
    Filter,
    GroupExpression,
    Literal,
    MethodCall,
    Subscript,
    Variable,
)
from lq.syntax.parser import ExpressionParser


class TestExpressionParser:

    def setup_method(self):
        self.parser = ExpressionParser()

    def test_empty_expression_error(self):
        with pytest.raises(ExpressionSyntaxError, match="Empty expression"):
            self.parser.parse("   ")

    def test_variable_path(self):
        result = self.parser.parse("user.name")
        assert isinstance(result, Variable)
        assert result.name == "user"
        assert result.accessors == (Attribute("name"),)

    def test_subscripts(self):
        result = self.parser.parse("items[0]['title']")
        assert isinstance(result, Variable)
        assert result.accessors == (Subscript(Literal(0)), Subscript(Literal("title")))

    def test_method_call(self):
        result = self.parser.parse("user.name.slice(1, 2)")
        assert isinstance(result, Variable)
        assert result.accessors[-1] == MethodCall("slice", [Literal(1), Literal(2)])

    def test_comparison(self):
        result = self.parser.parse('name != "test"')
        assert isinstance(result, Comparison)
        assert result.operator == "!="
        assert result.right == Literal("test")

    def test_contains(self):
        result = self.parser.parse('list contains "item"')
        assert isinstance(result, Comparison)
        assert result.operator == "contains"

    def test_or_binds_weaker_than_and(self):
        result = self.parser.parse("a or b and c")
        assert isinstance(result, BinaryExpression)
        assert result.operator == ExpressionType.OR
        assert isinstance(result.right, BinaryExpression)
        assert result.right.operator == ExpressionType.AND

    def test_grouping(self):
        result = self.parser.parse("(a or b) and c")
        assert result.get_type() == ExpressionType.AND
        assert isinstance(result.left, GroupExpression)

    def test_filters_chain(self):
        result = self.parser.parse("name | capitalize | length")
        assert isinstance(result, Filter)
        assert result.name == "length"
        assert isinstance(result.value, Filter)

    def test_literals(self):
        assert self.parser.parse("true") == Literal(True)
        assert self.parser.parse("nil") == Literal(None)
        assert self.parser.parse("2.5") == Literal(2.5)

    def test_string_representation(self):
        assert str(self.parser.parse('user.age >= 18 and tags contains "x"')) == 'user.age >= 18 and tags contains "x"'

    def test_unexpected_token(self):
        with pytest.raises(ExpressionSyntaxError, match="Unexpected token"):
            self.parser.parse("a b")

    def test_unclosed_group(self):
        with pytest.raises(ExpressionSyntaxError, match="Expected '\\)'"):
            self.parser.parse("(a or b")
