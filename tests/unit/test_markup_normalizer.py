"""Unit tests for storage-format markup flattening."""

import pytest

from docket.contexts.intake.markup_normalizer import (
    collapse_whitespace,
    decode_entities,
    strip_inline,
    strip_markup,
)


@pytest.mark.unit
def test_paragraphs_become_lines():
    assert strip_markup("<p>Hello&nbsp;<strong>world</strong></p><p>Bye</p>") == "Hello world\nBye"


@pytest.mark.unit
def test_line_breaks_become_newlines():
    assert strip_markup("line one<br/>line two<br />line three") == "line one\nline two\nline three"


@pytest.mark.unit
def test_list_items_and_rows_end_lines():
    text = strip_markup("<ul><li>one</li><li>two</li></ul><table><tr><td>a</td></tr><tr><td>b</td></tr></table>")
    assert text.split("\n") == ["one", "two", "a", "b"]


@pytest.mark.unit
def test_named_entities_decoded():
    assert strip_markup("A &amp; B &rarr; C &lt;tag&gt; &quot;q&quot;") == 'A & B → C <tag> "q"'


@pytest.mark.unit
def test_ampersand_decoded_last():
    """An escaped entity stays an entity instead of being double-decoded."""
    assert decode_entities("&amp;lt;") == "&lt;"


@pytest.mark.unit
def test_unknown_entities_left_alone():
    assert decode_entities("&copy; 2025") == "&copy; 2025"


@pytest.mark.unit
def test_excess_newlines_collapse_to_blank_line():
    assert strip_markup("<p>a</p><p></p><p></p><p>b</p>") == "a\n\nb"


@pytest.mark.unit
def test_zero_width_characters_removed():
    assert strip_markup("a\u200bb\u00a0c") == "ab c"


@pytest.mark.unit
def test_confluence_elements_removed():
    markup = '<ac:link><ri:page ri:content-title="Other" /><ac:plain-text-link-body>see</ac:plain-text-link-body></ac:link>'
    assert strip_markup(markup) == "see"


@pytest.mark.unit
@pytest.mark.parametrize("fragment", ["", None, "<p>unclosed <b text", "<<<>>>", "</p></li>"])
def test_malformed_input_never_raises(fragment):
    result = strip_markup(fragment)
    assert isinstance(result, str)


@pytest.mark.unit
def test_malformed_tag_kept_as_text():
    assert strip_markup("<p>unclosed <b text") == "unclosed <b text"


@pytest.mark.unit
def test_strip_inline_flattens_to_one_line():
    assert strip_inline("<li>  one\n two <em>three</em></li>") == "one two three"


@pytest.mark.unit
def test_collapse_whitespace():
    assert collapse_whitespace(" a \n\n b\tc ") == "a b c"
