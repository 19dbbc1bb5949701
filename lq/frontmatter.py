"""
YAML frontmatter документа.

Блок между строками '---' в начале файла. Перед разбором YAML
последовательности '{{' экранируются, чтобы подстановки не читались как
flow-маппинги; после разбора экранирование снимается.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from io import StringIO
from typing import Any, Callable, Dict, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from .errors import FrontMatterError

_FRONTMATTER = re.compile(
    r"^(?P<open>-{3,} *\r?\n)(?P<meta>[\s\S]+?)(?P<close>\r?\n-{3,}(?: *\r?\n|\Z))"
)

_YAML_RT = YAML(typ="rt")
_YAML_RT.indent(mapping=2, sequence=4, offset=2)
# без переносов длинных строк
_YAML_RT.width = 1000000

_ESCAPE = "(({{"


def escape_liquid(text: str) -> str:
    return text.replace("{{", _ESCAPE)


def unescape_liquid(text: str) -> str:
    return text.replace(_ESCAPE, "{{")


def walk_strings(value: Any, fn: Callable[[str], Any]) -> Any:
    """
    Копия JSON-подобного значения, где каждая строка заменена на fn(строка).

    Маппинги и последовательности ruamel приводятся к dict и list.
    """
    if isinstance(value, str):
        return fn(value)
    if isinstance(value, Mapping):
        return {key: walk_strings(item, fn) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [walk_strings(item, fn) for item in value]
    return value


def _to_yaml_tree(value: Any) -> Any:
    # CommentedMap сохраняет порядок ключей при выводе
    if isinstance(value, Mapping):
        node = CommentedMap()
        for key, item in value.items():
            node[key] = _to_yaml_tree(item)
        return node
    if isinstance(value, (list, tuple)):
        return CommentedSeq(_to_yaml_tree(item) for item in value)
    if isinstance(value, str):
        return str(value)
    return value


def extract_front_matter(text: str) -> Tuple[Dict[str, Any], str, str]:
    """
    Отделяет frontmatter от тела документа.

    Блок, в котором нет ни одного ключа (например, только комментарии),
    считается частью тела.

    Returns:
        (данные frontmatter, тело без frontmatter, исходный текст блока frontmatter)

    Raises:
        FrontMatterError: Если YAML внутри блока некорректен
    """
    match = _FRONTMATTER.match(text)
    if not match:
        return {}, text, ""

    raw = match.group(0)
    try:
        data = _YAML_RT.load(escape_liquid(match.group("meta")))
    except YAMLError as e:
        raise FrontMatterError(f"Invalid YAML frontmatter: {e}", e) from e

    if not data or not isinstance(data, Mapping):
        return {}, text, ""
    return walk_strings(data, unescape_liquid), text[len(raw):], raw


def compose_front_matter(data: Mapping, stripped: str = "") -> str:
    """Собирает документ обратно; пустой frontmatter опускается."""
    if not data:
        return stripped

    buf = StringIO()
    _YAML_RT.dump(_to_yaml_tree(data), buf)
    dumped = buf.getvalue().strip()
    return f"---\n{dumped}\n---\n{stripped}"


__all__ = [
    "extract_front_matter",
    "compose_front_matter",
    "walk_strings",
    "escape_liquid",
    "unescape_liquid",
]
