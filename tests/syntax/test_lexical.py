"""
Tests for the shared lexical patterns.
"""

import pytest

from lq.syntax.lexical import FOR_SYNTAX, TAG_LINE, VARS, is_single_variable


@pytest.mark.parametrize(
    "text",
    [
        "{{variable}}",
        "{{ variable | filter }}",
        "{{ do_something(1) }}",
        "{{ do_something(2, 'explicit value', 200) }}",
        "{{ do_something(3, param_3=300) }}",
        "{{ do_something_without_params() }}",
    ],
)
def test_single_variable(text):
    assert is_single_variable(text)


@pytest.mark.parametrize(
    "text",
    [
        "{{variable1}} {{variable2}}",
        "some text {{variable}}",
        "{{variable}} some text",
        " {{variable}} ",
        "  {{variable}}  ",
        "\t{{variable}} \n",
        "{{variable}}\n",
        "",
        "just some text",
        "{variable}",
        "{{variable}",
        "not_var{{ do_something(1) }}",
        "not_var{{ do_something_without_params() }}",
        "{{ do_something(2, 'explicit value', 200) }} {#- do_something(1, 'explicit value', 100) -#}",
        "{%- macro do_something(param_1, param_2='default value', param_3=none) -%}",
        "{%- endmacro -%}",
        "{# body of macro here #}",
        "{#- do_something(1, 'default value', none) -#}",
    ],
)
def test_not_single_variable(text):
    assert not is_single_variable(text)


def test_tag_line():
    match = TAG_LINE.match(" elsif user.name == 'Bob' ")
    assert match.group(1) == "elsif"
    assert match.group(2).strip() == "user.name == 'Bob'"


@pytest.mark.parametrize(
    "args, variable, collection",
    [
        ("user in users", "user", "users"),
        ("tag in item.tags", "tag", "item.tags"),
        ("x in data['list']", "x", "data['list']"),
    ],
)
def test_for_syntax(args, variable, collection):
    match = FOR_SYNTAX.search(args)
    assert match.group(1, 2) == (variable, collection)


def test_for_syntax_rejects_malformed():
    assert FOR_SYNTAX.search("user of users") is None


def test_vars_groups():
    match = VARS.search("a not_var{{ x.y }} b")
    assert match.group(2) == "not_var"
    assert match.group(3) == "{{ x.y }}"
    assert match.group(4) == " x.y "
