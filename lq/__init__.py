"""
lq: разрешение условий и циклов Liquid-подобных шаблонов документации
с картой соответствия строк результата строкам исходника.
"""

from .config import LiquidSettings, load_settings
from .context import LiquidContext, create_context
from .engine import liquid_document, liquid_json, liquid_snippet
from .errors import FrontMatterError, LiquidSyntaxError, LQUserError, SettingsError
from .logger import Logger, NullLogger, RecordingLogger, StdLogger
from .sourcemap import SourceMap
from .syntax import NoValue, evaluate

__all__ = [
    "LiquidSettings",
    "load_settings",
    "LiquidContext",
    "create_context",
    "liquid_snippet",
    "liquid_json",
    "liquid_document",
    "SourceMap",
    "NoValue",
    "evaluate",
    "Logger",
    "StdLogger",
    "NullLogger",
    "RecordingLogger",
    "LQUserError",
    "LiquidSyntaxError",
    "FrontMatterError",
    "SettingsError",
]
