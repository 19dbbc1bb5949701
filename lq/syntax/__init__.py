"""
Выражения в тегах: лексер, парсер и вычислитель.
"""

from .evaluate import NoValue, evaluate, is_truthy
from .lexer import ExpressionSyntaxError
from .parser import ExpressionParser

__all__ = ["NoValue", "evaluate", "is_truthy", "ExpressionParser", "ExpressionSyntaxError"]
