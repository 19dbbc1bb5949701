"""
Устаревшая стратегия разрешения условий.

Сканирование и сборка групп общие с ConditionResolver; отличаются
выбор ветки (без строгого режима), правило обрезки и реакция на
else/elsif без открытого if считается фатальной ошибка.
"""

from __future__ import annotations

from typing import Mapping, Optional, Tuple

from ..errors import LiquidSyntaxError
from ..syntax.evaluate import evaluate, is_truthy
from .conditions import Branch, ConditionGroup, ConditionResolver, Selection
from .scanner import TagMatch
from .trim import (
    consumed_newline,
    head_linebreak,
    prepared_left_content,
    remove_indent_block,
    tail_linebreak,
)


class LegacyConditionResolver(ConditionResolver):
    """
    Резолвер со старой политикой пробелов.

    Содержимое ветки берётся строго между '%}' и '{%' соседних тегов;
    от него отрезается один ведущий и один хвостовой перевод строки и
    отступ последней строки. Отступ перед тегом if остаётся в тексте.
    """

    def _on_orphan_branch(self, tag: TagMatch) -> None:
        raise LiquidSyntaxError(
            f"{tag.keyword.capitalize()} block must follow an opened if block",
            tag.start + len(head_linebreak(tag.raw)),
            self.ctx.path,
        )

    def _select(self, group: ConditionGroup, scope: Mapping) -> Selection:
        for branch in group.branches:
            if not branch.expr or is_truthy(evaluate(self.ctx, branch.expr, scope)):
                return branch
        return None

    def _rewrite(self, text: str, group: ConditionGroup, branch: Optional[Branch]) -> Tuple[str, int]:
        if_start = group.start + len(head_linebreak(group.raw_start))
        endif_end = group.end - len(tail_linebreak(group.raw_end))

        result = text[branch.open_end:branch.close_start] if branch is not None else ""
        left = prepared_left_content(text, if_start, result)
        shift = consumed_newline(left, text, endif_end, result)

        if result:
            if result.startswith("\n"):
                result = result[1:]
            result = remove_indent_block(result)
            if result.endswith("\n"):
                result = result[:-1]

        left_part = left + result
        return left_part + text[endif_end + shift:], len(left_part)


__all__ = ["LegacyConditionResolver"]
