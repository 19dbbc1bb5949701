"""
Резолвер циклов {% for name in collection %} ... {% endfor %}.

Отслеживается только один открытый цикл: вложенные for пропускаются
счётчиком и разрешаются при рекурсивном рендеринге тела для каждого
элемента коллекции.
"""

from __future__ import annotations

import logging
from collections import ChainMap
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..context import LiquidContext
from ..syntax.evaluate import evaluate
from ..syntax.lexical import FOR_SYNTAX
from .scanner import CYCLE_TAG, TagMatch, TagScanner
from .substitutions import stringify
from .trim import consumed_newline, prepared_left_content

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleTag:
    """
    Открытый цикл.

    Attributes:
        variable: Имя переменной цикла (None, если синтаксис тега некорректен)
        collection: Выражение коллекции
        start: Начало тега for
        content_start: Начало тела цикла
        multiline: Тег for забрал перевод строки (блочный стиль)
    """
    variable: Optional[str]
    collection: str
    start: int
    content_start: int
    multiline: bool


class CycleResolver:
    """
    Раскрывает циклы верхнего уровня текста.

    Args:
        ctx: Контекст вызова
        depth: Глубина рекурсии рендеринга тел циклов
    """

    def __init__(self, ctx: LiquidContext, depth: int = 0):
        self.ctx = ctx
        self.depth = depth

    def resolve(self, text: str, scope: Mapping, sourcemap=None) -> str:
        stack: List[CycleTag] = []
        skipped = 0
        scanner = TagScanner(CYCLE_TAG, text, body_groups=("for", "endfor"))

        for tag in scanner:
            if tag.keyword == "for":
                if stack:
                    skipped += 1
                    continue
                stack.append(self._open(tag))

            elif tag.keyword == "endfor":
                if skipped:
                    skipped -= 1
                    continue
                if not stack:
                    self.ctx.logger.error(f"For block must be opened before close{self.ctx.where()}")
                    continue
                cycle = stack.pop()
                scanner.text, scanner.position = self._expand(scanner.text, scope, cycle, tag, sourcemap)

        if stack:
            self.ctx.logger.error(f"For block must be closed{self.ctx.where()}")

        return scanner.text

    def _open(self, tag: TagMatch) -> CycleTag:
        match = FOR_SYNTAX.search(tag.args)
        if not match:
            self.ctx.logger.error(f"Incorrect syntax in for tag '{tag.args}'{self.ctx.where()}")
        return CycleTag(
            variable=match.group(1) if match else None,
            collection=match.group(2) if match else "",
            start=tag.start,
            content_start=tag.end,
            multiline=tag.raw.endswith("\n"),
        )

    def _expand(self, text: str, scope: Mapping, cycle: CycleTag, endfor: TagMatch, sourcemap) -> Tuple[str, int]:
        content_end = endfor.start
        end = endfor.end
        template = text[cycle.content_start:content_end]

        rendered = [
            self._render(template, scope, cycle.variable, item).rstrip(" ")
            for item in self._collection(cycle, scope)
        ]
        result = ("\n" if cycle.multiline else "").join(rendered)

        if sourcemap is not None:
            self._patch_sourcemap(text, template, result, cycle, content_end, end, sourcemap)

        left = prepared_left_content(text, cycle.start, result)
        shift = consumed_newline(left, text, end, result)
        if result.startswith(" "):
            result = result[1:]

        _log.debug("for-block at %d expanded over %d item(s)", cycle.start, len(rendered))
        left_part = left + result
        return left_part + text[end + shift:], len(left_part)

    @staticmethod
    def _patch_sourcemap(source: str, template: str, result: str, cycle: CycleTag, content_end: int, end: int, sourcemap) -> None:
        if not cycle.multiline:
            # строчный цикл: правка записывается без изменения нумерации
            sourcemap.patch()
            return

        lines = sourcemap.lines(source)
        sourcemap.patch(
            delete=[
                sourcemap.location(cycle.start, cycle.content_start - 1, lines),
                sourcemap.location(content_end + 1, end, lines),
            ],
            replace=[
                (sourcemap.location(cycle.content_start, cycle.content_start, lines).start, template, result),
            ],
        )

    def _collection(self, cycle: CycleTag, scope: Mapping) -> Sequence[Any]:
        if cycle.variable is None:
            return []
        value = evaluate(self.ctx, cycle.collection, scope)
        if not isinstance(value, (list, tuple)):
            self.ctx.logger.error(f"{cycle.collection} is undefined or not iterable{self.ctx.where()}")
            return []
        return value

    def _render(self, template: str, scope: Mapping, variable: Optional[str], item: Any) -> str:
        from ..engine import liquid_snippet

        local_scope = ChainMap({variable: item}, scope)
        output = liquid_snippet(self.ctx, template, local_scope, depth=self.depth + 1)
        return output if isinstance(output, str) else stringify(output)


def apply_cycles(ctx: LiquidContext, text: str, scope: Mapping, sourcemap=None, depth: int = 0) -> str:
    return CycleResolver(ctx, depth).resolve(text, scope, sourcemap)


__all__ = ["CycleTag", "CycleResolver", "apply_cycles"]
