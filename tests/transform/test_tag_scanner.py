"""
Tests for the tag scanner.
"""

from lq.transform.scanner import CONDITION_TAG, CYCLE_TAG, TagScanner, classify


def test_classify():
    assert classify("  if  a == b ") == ("if", "a == b")
    assert classify("endif") == ("endif", "")
    assert classify(" for user in users ") == ("for", "user in users")
    assert classify("") is None
    assert classify("   ") is None


def test_condition_tags_in_order():
    tags = list(TagScanner(CONDITION_TAG, "a {% if x %} b {% else %} c {% endif %}"))
    assert [(t.keyword, t.args) for t in tags] == [("if", "x"), ("else", ""), ("endif", "")]


def test_condition_tag_captures_adjacent_linebreaks():
    text = "a\n  {% if x %}  \nb"
    tag = next(iter(TagScanner(CONDITION_TAG, text)))
    assert tag.raw == "\n  {% if x %}  \n"
    assert tag.start == 1
    assert tag.end == len(text) - 1


def test_condition_tag_with_trim_markers():
    tag = next(iter(TagScanner(CONDITION_TAG, "{%- if x -%}")))
    assert (tag.keyword, tag.args) == ("if", "x")


def test_empty_tags_are_skipped():
    tags = list(TagScanner(CONDITION_TAG, "{%%} {% %} {% endif %}"))
    assert [t.keyword for t in tags] == ["endif"]


def test_cycle_tags():
    text = "{% for x in xs %}\nbody\n{% endfor %}"
    tags = list(TagScanner(CYCLE_TAG, text, body_groups=("for", "endfor")))
    assert [t.keyword for t in tags] == ["for", "endfor"]
    assert tags[0].raw == "{% for x in xs %}\n"
    assert tags[1].raw == "\n{% endfor %}"


def test_cycle_pattern_ignores_other_tags():
    tags = list(TagScanner(CYCLE_TAG, "{% if a %}{% endif %}", body_groups=("for", "endfor")))
    assert tags == []


def test_position_can_be_moved_while_iterating():
    scanner = TagScanner(CONDITION_TAG, "{% if a %}{% endif %}")
    seen = []
    for tag in scanner:
        seen.append(tag.keyword)
        if tag.keyword == "if":
            scanner.text = "{% if a %}{% else %}{% endif %}"
    assert seen == ["if", "else", "endif"]


def test_rewind():
    scanner = TagScanner(CONDITION_TAG, "x\n{% note %}\n{% if a %}")
    tags = iter(scanner)
    first = next(tags)
    assert first.raw == "\n{% note %}\n"
    scanner.rewind(1)
    second = next(tags)
    assert second.raw == "\n{% if a %}"
