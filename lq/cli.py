from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .config import LiquidSettings, load_settings
from .context import create_context
from .engine import liquid_document
from .errors import LQUserError
from .frontmatter import walk_strings
from .logger import StdLogger, setup_logging_once
from .sourcemap import SourceMap
from .version import tool_version

_YAML_RT = YAML(typ="rt")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lq",
        description="Liquid-style conditions and cycles resolver with source maps",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Обработать документ и вывести результат")
    sp_render.add_argument("target", help="путь к документу (- для stdin)")
    sp_render.add_argument("--vars", metavar="FILE", help="переменные в YAML/JSON")
    sp_render.add_argument("--settings", metavar="FILE", help="настройки шаблонизатора в YAML")
    sp_render.add_argument(
        "--strict",
        action="store_true",
        help="неизвестные переменные откладывают разрешение условий",
    )
    sp_render.add_argument("--legacy", action="store_true", help="устаревшая политика обрезки условий")
    sp_render.add_argument(
        "--sourcemap",
        action="store_true",
        help="вывести JSON {text, sourcemap} вместо текста",
    )

    return p


def _read_target(target: str) -> str:
    if target == "-":
        return sys.stdin.read()
    path = Path(target)
    if not path.is_file():
        raise LQUserError(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_vars(path_str: str | None) -> Dict[str, Any]:
    """Загружает переменные из YAML (JSON тоже подходит)."""
    if not path_str:
        return {}
    path = Path(path_str)
    if not path.is_file():
        raise LQUserError(f"Vars file not found: {path}")
    try:
        data = _YAML_RT.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise LQUserError(f"{path}: invalid YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LQUserError(f"{path}: variables must be a mapping")
    return walk_strings(data, str)


def _settings(ns: argparse.Namespace) -> LiquidSettings:
    settings = load_settings(Path(ns.settings)) if ns.settings else LiquidSettings()
    overrides: Dict[str, Any] = {}
    if ns.strict:
        overrides["conditions"] = "strict"
    if ns.legacy:
        overrides["legacy_conditions"] = True
    if not overrides:
        return settings
    return replace(settings, **overrides)


def _run_render(ns: argparse.Namespace) -> int:
    text = _read_target(ns.target)
    ctx = create_context(
        logger=StdLogger(),
        settings=_settings(ns),
        path=None if ns.target == "-" else ns.target,
    )
    scope = _load_vars(ns.vars)

    if ns.sourcemap:
        sourcemap = SourceMap(text)
        result = liquid_document(ctx, text, scope, sourcemap)
        sys.stdout.write(json.dumps({"text": result, "sourcemap": sourcemap.dump()}, ensure_ascii=False, indent=2))
        sys.stdout.write("\n")
        return 0

    sys.stdout.write(liquid_document(ctx, text, scope))
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    setup_logging_once()

    try:
        if ns.cmd == "render":
            return _run_render(ns)
    except LQUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
