"""
Точки входа шаблонизатора.

Порядок обработки фрагмента:
  блоки кода сохраняются → циклы → условия → подстановки → блоки кода возвращаются.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .context import LiquidContext
from .frontmatter import compose_front_matter, extract_front_matter, walk_strings
from .sourcemap import SourceMap, SourceMapWindow
from .transform.conditions import apply_conditions
from .transform.cycles import apply_cycles
from .transform.fences import CodeFences
from .transform.substitutions import apply_substitutions, stringify


def liquid_snippet(
    ctx: LiquidContext,
    text: str,
    scope: Mapping,
    sourcemap: Optional[Union[SourceMap, SourceMapWindow]] = None,
    *,
    depth: int = 0,
) -> Any:
    """
    Обрабатывает фрагмент текста.

    Args:
        ctx: Контекст вызова
        text: Исходный текст
        scope: Переменные
        sourcemap: Карта исходников, получающая патчи структурных правок
        depth: Глубина рекурсии (растёт при рендеринге тел циклов)

    Returns:
        Обработанный текст. Если весь текст состоит из одной подстановки {{ ... }},
        возвращается её значение как есть.
    """
    settings = ctx.settings
    if depth > settings.max_depth:
        ctx.logger.error(f"Maximum nesting depth {settings.max_depth} exceeded{ctx.where()}")
        return text

    fences = None if settings.conditions_in_code else CodeFences()
    output: Any = fences.save(ctx, text, scope) if fences is not None else text

    if settings.cycles:
        output = apply_cycles(ctx, output, scope, sourcemap, depth=depth)

    if settings.conditions:
        output = apply_conditions(ctx, output, scope, sourcemap)

    if settings.substitutions:
        output = apply_substitutions(ctx, output, scope)

    if fences is not None and isinstance(output, str):
        output = fences.restore(output)

    return output


def liquid_json(ctx: LiquidContext, data: Any, scope: Mapping) -> Any:
    """Обрабатывает каждую строку JSON-подобного значения."""
    return walk_strings(data, lambda value: liquid_snippet(ctx, value, scope))


def liquid_document(
    ctx: LiquidContext,
    text: str,
    scope: Mapping,
    sourcemap: Optional[SourceMap] = None,
) -> str:
    """
    Обрабатывает документ с frontmatter.

    Значения frontmatter рендерятся как JSON, а тело как фрагмент.
    Карта исходников корректируется на изменение высоты frontmatter.
    """
    front_matter, stripped, raw = extract_front_matter(text)
    composed = compose_front_matter(liquid_json(ctx, front_matter, scope))

    body_map = None
    if sourcemap is not None:
        raw_lines = raw.count("\n")
        composed_lines = composed.count("\n")
        if raw and composed != raw:
            sourcemap.patch(delete=[(1, raw_lines)], offset=[(raw_lines + 1, composed_lines)])
        body_map = sourcemap.window(composed_lines)

    body = liquid_snippet(ctx, stripped, scope, body_map)
    if not isinstance(body, str):
        body = stringify(body)
    return composed + body


__all__ = ["liquid_snippet", "liquid_json", "liquid_document"]
