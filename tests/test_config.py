from pathlib import Path

import pytest

from lq.config import LiquidSettings, load_settings
from lq.context import create_context
from lq.errors import SettingsError
from lq.logger import StdLogger


def test_defaults():
    s = LiquidSettings.from_dict(None)
    assert s == LiquidSettings()
    assert s.conditions is True and s.cycles and s.substitutions
    assert not s.conditions_in_code and not s.legacy_conditions
    assert s.max_depth == 32
    assert not s.strict


def test_camel_case_keys():
    s = LiquidSettings.from_dict({
        "conditions": "strict",
        "conditionsInCode": True,
        "keepConditionSyntaxOnTrue": True,
        "keepNotVar": True,
        "legacyConditions": True,
        "maxDepth": 5,
    })
    assert s.strict
    assert s.conditions_in_code and s.keep_condition_syntax_on_true and s.keep_not_var
    assert s.legacy_conditions
    assert s.max_depth == 5


def test_unknown_key():
    with pytest.raises(SettingsError) as excinfo:
        LiquidSettings.from_dict({"condition": True})
    assert "unknown key(s): condition" in str(excinfo.value)


@pytest.mark.parametrize(
    "data",
    [
        {"conditions": "loose"},
        {"cycles": "yes"},
        {"maxDepth": 0},
        {"maxDepth": True},
        {"maxDepth": "10"},
    ],
)
def test_invalid_values(data):
    with pytest.raises(SettingsError):
        LiquidSettings.from_dict(data)


def test_settings_error_is_value_error():
    with pytest.raises(ValueError):
        LiquidSettings.from_dict({"cycles": 1})


def test_load_settings(tmp_path: Path):
    p = tmp_path / "liquid.yaml"
    p.write_text("conditions: strict\nkeepNotVar: true\n", encoding="utf-8")
    s = load_settings(p)
    assert s.strict and s.keep_not_var


def test_load_settings_empty_file(tmp_path: Path):
    p = tmp_path / "liquid.yaml"
    p.write_text("", encoding="utf-8")
    assert load_settings(p) == LiquidSettings()


@pytest.mark.parametrize("content", ["- a\n- b\n", "conditions: [oops\n"])
def test_load_settings_rejects_bad_files(tmp_path: Path, content):
    p = tmp_path / "liquid.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(p)


def test_create_context():
    ctx = create_context(settings={"cycles": False}, path="a.md")
    assert ctx.settings.cycles is False
    assert isinstance(ctx.logger, StdLogger)
    assert ctx.where() == " in a.md"
    assert create_context().where() == ""


def test_create_context_accepts_settings_instance():
    s = LiquidSettings(conditions="strict")
    assert create_context(settings=s).settings is s
