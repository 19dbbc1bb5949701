"""
Настройки резолвера.

Ключи словаря настроек совпадают с опциями шаблонизатора документации
(conditions, cycles, substitutions, conditionsInCode, ...). Файл настроек
читается в формате YAML через ruamel.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import SettingsError

ConditionsMode = Union[bool, Literal["strict"]]

_YAML_RT = YAML(typ="rt")

# внешнее имя ключа -> поле датакласса
_KEYS: Dict[str, str] = {
    "conditions": "conditions",
    "cycles": "cycles",
    "substitutions": "substitutions",
    "conditionsInCode": "conditions_in_code",
    "keepConditionSyntaxOnTrue": "keep_condition_syntax_on_true",
    "keepNotVar": "keep_not_var",
    "legacyConditions": "legacy_conditions",
    "maxDepth": "max_depth",
}


def _assert_only_keys(d: Dict[str, Any] | None, allowed: Iterable[str], *, ctx: str) -> None:
    if d is None:
        return
    allowed_set = set(allowed)
    extra = set(d.keys()) - allowed_set
    if extra:
        raise SettingsError(f"{ctx}: unknown key(s): {', '.join(sorted(extra))}")


@dataclass(frozen=True)
class LiquidSettings:
    """
    Набор флагов шаблонизатора.

    conditions: True/False или "strict" (неизвестные переменные
    откладывают разрешение всего блока вместо ложного значения).
    """
    conditions: ConditionsMode = True
    cycles: bool = True
    substitutions: bool = True
    conditions_in_code: bool = False
    keep_condition_syntax_on_true: bool = False
    keep_not_var: bool = False
    legacy_conditions: bool = False
    # предел вложенности рекурсивного рендеринга тел циклов
    max_depth: int = 32

    @property
    def strict(self) -> bool:
        return self.conditions == "strict"

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> LiquidSettings:
        if not d:
            return LiquidSettings()
        _assert_only_keys(d, _KEYS.keys(), ctx="LiquidSettings")

        conditions = d.get("conditions", True)
        if conditions not in (True, False, "strict"):
            raise SettingsError(f"LiquidSettings: conditions must be a boolean or 'strict', got {conditions!r}")

        flags: Dict[str, Any] = {}
        for key, name in _KEYS.items():
            if key in ("conditions", "maxDepth") or key not in d:
                continue
            value = d[key]
            if not isinstance(value, bool):
                raise SettingsError(f"LiquidSettings: {key} must be a boolean, got {value!r}")
            flags[name] = value

        max_depth = d.get("maxDepth", 32)
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise SettingsError(f"LiquidSettings: maxDepth must be a positive integer, got {max_depth!r}")

        return LiquidSettings(conditions=conditions, max_depth=max_depth, **flags)


def load_settings(path: Path) -> LiquidSettings:
    """
    Load settings from a YAML file.

    An empty file yields the default settings.
    """
    try:
        data = _YAML_RT.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise SettingsError(f"{path}: invalid YAML: {e}") from e
    if data is None:
        return LiquidSettings()
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: settings must be a mapping")
    return LiquidSettings.from_dict(dict(data))


__all__ = ["LiquidSettings", "ConditionsMode", "load_settings"]
