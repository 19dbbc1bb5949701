"""
Резолвер условных блоков {% if %} / {% elsif %} / {% else %} / {% endif %}.

Блоки сопоставляются лексическим сканированием без построения дерева
документа. При закрытии группы выбирается первая истинная ветка, и весь
диапазон группы заменяется её содержимым с обрезкой переводов строк,
принадлежащих тегам. Вложенные группы закрываются раньше внешних и
переписываются первыми.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple, Union

from ..context import LiquidContext
from ..syntax.evaluate import NoValue, evaluate, is_truthy
from .scanner import CONDITION_TAG, TagMatch, TagScanner
from .trim import head_linebreak, tail_linebreak

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Branch:
    """
    Ветка группы (if, elsif или else).

    Attributes:
        expr: Условие ветки ('' для else)
        raw_start: Открывающий тег ветки с захваченными переводами строк
        start: Начало содержимого ветки
        raw_end: Тег, закрывший ветку (следующая ветка или endif)
        end: Конец содержимого ветки
    """
    expr: str
    raw_start: str
    start: int
    raw_end: str
    end: int

    @property
    def open_end(self) -> int:
        """Позиция сразу после '%}' открывающего тега."""
        return self.start - len(tail_linebreak(self.raw_start))

    @property
    def close_start(self) -> int:
        """Позиция '{%' закрывающего тега."""
        return self.end + len(head_linebreak(self.raw_end))


class ConditionGroup:
    """
    Группа if ... endif, собираемая по ходу сканирования.

    Ветки становятся неизменяемыми в момент закрытия (следующим тегом
    ветки или endif).
    """

    def __init__(self):
        self.branches: List[Branch] = []
        self._pending: Optional[Tuple[str, str, int]] = None

    def open_branch(self, raw: str, expr: str, start: int) -> int:
        """
        Открывает ветку тегом raw, найденным на позиции start.

        Returns:
            Позицию продолжения сканирования (перед захваченным хвостовым переводом строки)
        """
        self._close_pending(raw, start)
        self._pending = (raw, expr, start + len(raw))
        return start + len(raw) - len(tail_linebreak(raw))

    def close(self, raw: str, end: int) -> None:
        """Закрывает последнюю ветку тегом endif."""
        self._close_pending(raw, end)

    def _close_pending(self, raw: str, end: int) -> None:
        if self._pending is None:
            return
        raw_start, expr, start = self._pending
        self.branches.append(Branch(expr=expr, raw_start=raw_start, start=start, raw_end=raw, end=end))
        self._pending = None

    @property
    def raw_start(self) -> str:
        return self.branches[0].raw_start

    @property
    def raw_end(self) -> str:
        return self.branches[-1].raw_end

    @property
    def start(self) -> int:
        """Начало тега if (включая захваченный перевод строки)."""
        first = self.branches[0]
        return first.start - len(first.raw_start)

    @property
    def end(self) -> int:
        """Конец тега endif (включая захваченный перевод строки)."""
        last = self.branches[-1]
        return last.end + len(last.raw_end)

    @property
    def is_block(self) -> bool:
        """if и endif стоят на отдельных строках."""
        return bool(tail_linebreak(self.raw_start) and head_linebreak(self.raw_end))


class _Deferred:
    def __repr__(self) -> str:
        return "DEFERRED"


# группа оставляется в тексте как есть
DEFERRED = _Deferred()

Selection = Union[Branch, None, _Deferred]


class ConditionResolver:
    """
    Резолвер условных блоков.

    Обходит теги одним проходом: if кладёт группу на стек, elsif/else
    добавляют ветку в верхнюю группу, endif снимает группу и переписывает
    её диапазон в тексте.
    """

    def __init__(self, ctx: LiquidContext):
        self.ctx = ctx

    def resolve(self, text: str, scope: Mapping, sourcemap=None) -> str:
        """
        Разрешает все условные блоки текста.

        Args:
            text: Исходный текст
            scope: Переменные
            sourcemap: SourceMap (опционально), получает по патчу на каждую
                переписанную многострочную группу

        Returns:
            Текст без разрешённых групп
        """
        stack: List[ConditionGroup] = []
        scanner = TagScanner(CONDITION_TAG, text)

        for tag in scanner:
            if tag.keyword == "if":
                group = ConditionGroup()
                scanner.position = group.open_branch(tag.raw, tag.args, tag.start)
                stack.append(group)

            elif tag.keyword in ("elsif", "else"):
                if not stack:
                    self._on_orphan_branch(tag)
                    scanner.rewind(len(tail_linebreak(tag.raw)))
                    continue
                scanner.position = stack[-1].open_branch(tag.raw, tag.args, tag.start)

            elif tag.keyword == "endif":
                if not stack:
                    self.ctx.logger.error(f"If block must be opened before close{self.ctx.where()}")
                    scanner.rewind(len(tail_linebreak(tag.raw)))
                    continue
                group = stack.pop()
                group.close(tag.raw, tag.start)
                scanner.text, scanner.position = self._resolve_group(scanner.text, scope, group, sourcemap)

            else:
                scanner.rewind(len(tail_linebreak(tag.raw)))

        if stack:
            self.ctx.logger.error(f"Condition block must be closed{self.ctx.where()}")

        return scanner.text

    def _resolve_group(self, text: str, scope: Mapping, group: ConditionGroup, sourcemap) -> Tuple[str, int]:
        selected = self._select(group, scope)
        if selected is DEFERRED:
            return text, group.end - len(tail_linebreak(group.raw_end))

        branch = selected if isinstance(selected, Branch) else None
        result, position = self._rewrite(text, group, branch)

        if sourcemap is not None:
            self._patch_sourcemap(text, group, branch, sourcemap)

        _log.debug(
            "if-group at %d resolved to branch %s",
            group.start,
            group.branches.index(branch) if branch is not None else None,
        )
        return result, position

    def _on_orphan_branch(self, tag: TagMatch) -> None:
        self.ctx.logger.error(
            f"{tag.keyword.capitalize()} block must follow an opened if block{self.ctx.where()}"
        )

    def _select(self, group: ConditionGroup, scope: Mapping) -> Selection:
        """
        Первая ветка с пустым условием или истинным значением.

        DEFERRED: если в строгом режиме условие не вычислилось (NoValue)
        или при keep_condition_syntax_on_true условие равно ровно True.
        """
        settings = self.ctx.settings
        for branch in group.branches:
            if not branch.expr:
                return branch
            value = evaluate(self.ctx, branch.expr, scope, settings.strict)
            if value is NoValue or (settings.keep_condition_syntax_on_true and value is True):
                return DEFERRED
            if is_truthy(value):
                return branch
        return None

    def _rewrite(self, text: str, group: ConditionGroup, branch: Optional[Branch]) -> Tuple[str, int]:
        head = text[:group.start]
        tail = text[group.end:]
        result = self._trim(text, group, branch)
        return head + result + tail, len(head) + len(result) - len(tail_linebreak(group.raw_end))

    @staticmethod
    def _trim(text: str, group: ConditionGroup, branch: Optional[Branch]) -> str:
        if branch is None:
            head = head_linebreak(group.raw_start)
            tail = tail_linebreak(group.raw_end)
            rest = head + tail
            if rest != head and rest != tail:
                rest = rest.replace("\n", "", 1)
            return "\n" if group.is_block else rest

        content = text[branch.start:branch.end]
        if group.is_block:
            # блочный стиль: по одному переводу строки от тегов ветки
            if head_linebreak(branch.raw_start):
                content = "\n" + content
            if tail_linebreak(branch.raw_end):
                content = content + "\n"
            return content

        # строчный стиль: окружение тегов if и endif
        return head_linebreak(group.raw_start) + content + tail_linebreak(group.raw_end)

    @staticmethod
    def _patch_sourcemap(source: str, group: ConditionGroup, branch: Optional[Branch], sourcemap) -> None:
        lines = sourcemap.lines(source)
        source_range = sourcemap.location(group.start + 1, group.end - 1, lines)
        if source_range.start == source_range.end:
            # однострочная группа не меняет нумерацию строк
            sourcemap.patch()
            return

        if branch is None:
            sourcemap.patch(delete=[source_range])
            return

        kept = sourcemap.location(branch.start, branch.end, lines)
        sourcemap.patch(delete=[
            (kept.end + 1, source_range.end),
            (source_range.start, kept.start - 1),
        ])


def apply_conditions(ctx: LiquidContext, text: str, scope: Mapping, sourcemap=None) -> str:
    """Разрешает условия стратегией, выбранной настройкой legacy_conditions."""
    if ctx.settings.legacy_conditions:
        from .legacy_conditions import LegacyConditionResolver
        return LegacyConditionResolver(ctx).resolve(text, scope, sourcemap)
    return ConditionResolver(ctx).resolve(text, scope, sourcemap)


__all__ = ["Branch", "ConditionGroup", "ConditionResolver", "DEFERRED", "apply_conditions"]
