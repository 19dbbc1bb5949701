"""
Токенизация выражений внутри тегов {% ... %} и подстановок {{ ... }}.

Все виды лексем собраны в одно регулярное выражение с именованными
группами; порядок альтернатив задаёт приоритет (строки и числа раньше
идентификаторов, двухсимвольные операторы раньше односимвольных).
Пробельные символы пропускаются, любой нераспознанный символ считается
ошибкой.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List


class ExpressionSyntaxError(Exception):
    """Некорректное выражение (ошибка токенизации или разбора)."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


@dataclass
class Token:
    """
    Лексема выражения.

    Attributes:
        type: Вид лексемы: STRING, NUMBER, KEYWORD, IDENTIFIER, OPERATOR, SYMBOL или EOF
        value: Текст лексемы; у строк без обрамляющих кавычек
        position: Смещение начала лексемы в выражении
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"<{self.type} {self.value!r} @{self.position}>"


_TOKEN_RE = re.compile(
    r"""
    (?P<SPACE>\s+)
  | (?P<STRING>'[^']*'|"[^"]*")
  | (?P<NUMBER>-?\d+(?:\.\d+)?(?!\w))
  | (?P<OPERATOR>==|!=|<=|>=|<|>)
  | (?P<SYMBOL>[()\[\].,|])
  | (?P<IDENTIFIER>[^\W\d][\w-]*\??)
  | (?P<UNKNOWN>.)
    """,
    re.VERBOSE,
)

KEYWORDS = frozenset({"and", "or", "contains", "true", "false", "nil", "null"})


class ExpressionLexer:
    """Разбивает выражение на список лексем, завершённый EOF."""

    def tokenize(self, text: str) -> List[Token]:
        """
        Raises:
            ExpressionSyntaxError: Встречен символ, не входящий ни в одну лексему
        """
        result: List[Token] = []
        offset = 0

        while offset < len(text):
            m = _TOKEN_RE.match(text, offset)
            kind = m.lastgroup
            lexeme = m.group()

            if kind == "UNKNOWN":
                raise ExpressionSyntaxError(f"Unexpected character '{lexeme}'", offset)
            if kind == "STRING":
                result.append(Token(kind, lexeme[1:-1], offset))
            elif kind == "IDENTIFIER":
                result.append(Token("KEYWORD" if lexeme in KEYWORDS else kind, lexeme, offset))
            elif kind != "SPACE":
                result.append(Token(kind, lexeme, offset))

            offset = m.end()

        result.append(Token("EOF", "", offset))
        return result
