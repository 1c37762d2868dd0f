import string

import pytest

from rive_codegen.enginelib.escape import escape_string


@pytest.mark.parametrize("text", ["", "Hello, World!", "score: 10/20 {ok} [yes] 'single'", string.ascii_letters])
def test_plain_printable_text_is_unchanged(text):
    assert escape_string(text) == text


def test_quotes_and_newlines_are_escaped():
    escaped = escape_string('line1\nline2"quoted"')
    assert escaped == 'line1\\nline2\\"quoted\\"'
    assert "\n" not in escaped
    assert '"' not in escaped.replace('\\"', "")


def test_backslash_tab_and_carriage_return():
    assert escape_string("a\\b") == "a\\\\b"
    assert escape_string("a\tb\rc") == "a\\tb\\rc"


def test_other_control_characters_use_unicode_escapes():
    assert escape_string("bell\x07") == "bell\\u0007"
    assert escape_string("\x1b[0m") == "\\u001b[0m"


def test_non_ascii_printable_passes_through():
    assert escape_string("héllo wörld") == "héllo wörld"


def test_astral_characters_become_surrogate_pairs():
    assert escape_string("flag\U000E0067") == "flag\\udb40\\udc67"
    assert escape_string("\U0010FFFF") == "\\udbff\\udfff"
