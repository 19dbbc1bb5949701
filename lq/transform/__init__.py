"""
Резолверы тегов: условия, циклы, подстановки и защита блоков кода.
"""

from .conditions import ConditionResolver, apply_conditions
from .cycles import CycleResolver, apply_cycles
from .fences import CodeFences
from .legacy_conditions import LegacyConditionResolver
from .substitutions import apply_substitutions, stringify

__all__ = [
    "ConditionResolver",
    "LegacyConditionResolver",
    "CycleResolver",
    "CodeFences",
    "apply_conditions",
    "apply_cycles",
    "apply_substitutions",
    "stringify",
]
