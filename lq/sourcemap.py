"""
Карта соответствия строк результата строкам исходника.

Хранит журнал патчей (удаления и сдвиги строк) и по запросу
проигрывает его поверх тождественного массива [1..N]. Индекс массива это
исходная строка, значение это текущая строка либо -1 (строка удалена).
Каждый патч применяется к координатам, действовавшим на момент его
записи.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

DELETED = -1

_NEWLINE = re.compile(r"\n")


class LineRange(NamedTuple):
    """Диапазон номеров строк (1-based, обе границы включительно)."""
    start: int
    end: int


@dataclass(frozen=True)
class _Patch:
    deletes: Tuple[Tuple[int, int], ...]
    offsets: Tuple[Tuple[int, int], ...]


class SourceMap:
    """
    Журнал структурных правок текста.

    Usage:
        sm = SourceMap(text)
        text = liquid_snippet(ctx, text, scope, sm)
        sm.dump()  # {"<текущая строка>": "<исходная строка>"}
    """

    def __init__(self, content: str):
        self.size = len(self.lines(content)) - 1
        self._patches: List[_Patch] = []
        self._dump: Optional[Dict[str, str]] = None

    @staticmethod
    def lines(content: str) -> List[int]:
        """Смещения начала каждой строки плюс граница len(content) + 1."""
        result = [0]
        result.extend(m.end() for m in _NEWLINE.finditer(content))
        result.append(len(content) + 1)
        return result

    @staticmethod
    def location(start: int, end: int, lines: List[int], offset: int = 0) -> LineRange:
        """
        Номера строк, содержащих символы start и end.

        Поиск end продолжается с найденной строки start. Ненайденная
        граница даёт -1.
        """
        first_index = bisect_right(lines, start)
        last_index = bisect_right(lines, end, lo=first_index)
        first = first_index + offset if first_index < len(lines) else -1
        last = last_index + offset if last_index < len(lines) else -1
        return LineRange(first, last)

    def patch(
        self,
        delete: Iterable[Tuple[int, int]] = (),
        offset: Iterable[Tuple[int, int]] = (),
        replace: Iterable[Tuple[int, str, str]] = (),
    ) -> None:
        """
        Записывает одну правку.

        Args:
            delete: Диапазоны (start, end) удаляемых строк
            offset: Пары (from_line, delta): строки >= from_line сдвигаются на delta
            replace: Тройки (at_line, old_text, new_text). Строки после at_line,
                покрытые старым текстом, удаляются, последующие сдвигаются на
                разницу в числе строк.
        """
        deletes = [(int(start), int(end)) for start, end in delete]
        offsets = [(int(start), int(delta)) for start, delta in offset]

        for start, source, result in replace:
            source_lines = len(self.lines(source)) - 1
            result_lines = len(self.lines(result)) - 1
            delta = result_lines - source_lines
            deletes.append((start + 1, start + source_lines))
            offsets.append((start + 1, source_lines - 1 + delta))

        self._patches.append(_Patch(tuple(deletes), tuple(offsets)))
        self._dump = None

    def delete(self, start: int, content: str) -> None:
        """Удаляет строки от символа start до конца content."""
        lines = self.lines(content)
        self.patch(delete=[self.location(start, len(content), lines)])

    def window(self, line_offset: int) -> SourceMapWindow:
        """Вид на карту для фрагмента, начинающегося после line_offset строк."""
        return SourceMapWindow(self, line_offset)

    def dump(self) -> Dict[str, str]:
        """
        Sparse mapping {current line: original line}.

        Computed once and reused until the next patch.
        """
        if self._dump is None:
            self._dump = {
                str(value): str(index + 1)
                for index, value in enumerate(self._replay())
                if value > 0
            }
        return self._dump

    def origin(self, line: int) -> Optional[int]:
        """Исходная строка для текущей строки line (None, если строка синтезирована)."""
        original = self.dump().get(str(line))
        return int(original) if original is not None else None

    def _replay(self) -> List[int]:
        mapping = list(range(1, self.size + 1))

        for patch in self._patches:
            # удаления сдвигают все последующие строки назад
            shift = 0
            for index, value in enumerate(mapping):
                if value == DELETED:
                    continue
                if any(start <= value <= end for start, end in patch.deletes):
                    shift -= 1
                    mapping[index] = DELETED
                    continue
                for start, delta in patch.offsets:
                    if value >= start:
                        value += delta
                mapping[index] = value + shift

        return mapping


class SourceMapWindow:
    """
    Карта, видимая из фрагмента документа.

    Номера строк, вычисленные location, смещаются на line_offset;
    патчи пишутся в исходную карту.
    """

    def __init__(self, parent: SourceMap, line_offset: int):
        self.parent = parent
        self.line_offset = line_offset

    lines = staticmethod(SourceMap.lines)

    def location(self, start: int, end: int, lines: List[int], offset: int = 0) -> LineRange:
        return SourceMap.location(start, end, lines, offset + self.line_offset)

    def patch(self, delete=(), offset=(), replace=()) -> None:
        self.parent.patch(delete=delete, offset=offset, replace=replace)

    def dump(self) -> Dict[str, str]:
        return self.parent.dump()


__all__ = ["SourceMap", "SourceMapWindow", "LineRange", "DELETED"]
