"""
Tests for the expression lexer.
"""

import pytest

from lq.syntax.lexer import ExpressionLexer, ExpressionSyntaxError


class TestExpressionLexer:

    def setup_method(self):
        self.lexer = ExpressionLexer()

    def _types(self, text):
        return [(t.type, t.value) for t in self.lexer.tokenize(text)]

    def test_empty_string(self):
        tokens = self.lexer.tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == "EOF"

    def test_path_with_subscript(self):
        assert self._types("user.items[0]") == [
            ("IDENTIFIER", "user"),
            ("SYMBOL", "."),
            ("IDENTIFIER", "items"),
            ("SYMBOL", "["),
            ("NUMBER", "0"),
            ("SYMBOL", "]"),
            ("EOF", ""),
        ]

    def test_strings_lose_quotes(self):
        assert self._types("""'a b' "c" """)[:2] == [("STRING", "a b"), ("STRING", "c")]

    def test_keywords(self):
        types = self._types("a and b or c contains true false nil null")
        keywords = [value for kind, value in types if kind == "KEYWORD"]
        assert keywords == ["and", "or", "contains", "true", "false", "nil", "null"]

    def test_operators(self):
        ops = [value for kind, value in self._types("a == b != c <= d >= e < f > g") if kind == "OPERATOR"]
        assert ops == ["==", "!=", "<=", ">=", "<", ">"]

    def test_numbers(self):
        assert self._types("-1 2.5")[:2] == [("NUMBER", "-1"), ("NUMBER", "2.5")]

    def test_identifier_with_dash_and_question_mark(self):
        assert self._types("feature-flag empty?")[:2] == [
            ("IDENTIFIER", "feature-flag"),
            ("IDENTIFIER", "empty?"),
        ]

    def test_positions(self):
        tokens = self.lexer.tokenize("a  == 'b'")
        assert [t.position for t in tokens] == [0, 3, 6, 9]

    def test_unknown_character(self):
        with pytest.raises(ExpressionSyntaxError, match="Unexpected character '&'"):
            self.lexer.tokenize("a & b")
