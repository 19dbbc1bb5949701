"""
Tests for frontmatter extraction and composition.
"""

import textwrap

import pytest

from lq.engine import liquid_document
from lq.errors import FrontMatterError
from lq.frontmatter import compose_front_matter, extract_front_matter


@pytest.mark.parametrize(
    "text",
    [
        "---\nprop: value\n---\n# Content.",
        "---\nprop: value\n---\n\n# Content.",
        "---\nprop: value\n---\n\n\n\n\n\n# Content.",
        "# Content.",
        "\n\n\n\n# Content.",
    ],
)
def test_preserves_linebreaks_between_front_matter_and_content(text):
    front_matter, stripped, _ = extract_front_matter(text)
    assert compose_front_matter(front_matter, stripped) == text


def test_unquoted_substitution_syntax():
    text = textwrap.dedent("""\
        ---
        prop: {{ wouldbreak }}
        note: This snippet typically shouldn't be parsed, since {} is object syntax in YAML.
        ---

        Test.""")
    front_matter, stripped, raw = extract_front_matter(text)
    assert front_matter["prop"] == "{{ wouldbreak }}"
    assert stripped == "\nTest."
    assert raw.startswith("---\n") and raw.endswith("---\n")


def test_comment_only_block_is_body():
    text = "---\n# comment 1\n---"
    assert extract_front_matter(text) == ({}, text, "")


def test_invalid_yaml():
    with pytest.raises(FrontMatterError):
        extract_front_matter("---\nkey: [unclosed\n---\nBody")


def test_compose_keeps_key_order():
    composed = compose_front_matter({"b": 1, "a": 2}, "Body")
    assert composed == "---\nb: 1\na: 2\n---\nBody"


class TestSubstitutionsInFrontMatter:

    def test_empty_string_substitution(self, ctx):
        text = textwrap.dedent("""\
            ---
            verbatim: {{ var }}
            quotedSingle: '{{ var }}'
            quotedDouble: "{{ var }}"
            ---

            # Some content.""")
        result = liquid_document(ctx, text, {"var": ""})
        front_matter, stripped, _ = extract_front_matter(result)
        assert front_matter == {"verbatim": "", "quotedSingle": "", "quotedDouble": ""}
        assert stripped == "\n# Some content."

    @pytest.mark.parametrize(
        "key, value",
        [
            ("quotes", "This isn't your typical substitution. It has single quotes."),
            ("quotes", '"When you arise in the morning, think of what a precious privilege it is to be alive."'),
            ("braces", "{}"),
            ("brackets", "[]"),
            ("multiline", ">- This should break, right?\n\tRight?"),
        ],
    )
    def test_reserved_characters_survive(self, ctx, key, value):
        text = f"---\n{key}: {{{{ value }}}}\n---\nContent"
        result = liquid_document(ctx, text, {"value": value})
        front_matter, stripped, _ = extract_front_matter(result)
        assert front_matter == {key: value}
        assert stripped == "Content"
