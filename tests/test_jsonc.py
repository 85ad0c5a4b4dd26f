from __future__ import annotations

import json
from pathlib import Path

import pytest

from wbedit.errors import ConfigValidationError, NotFoundError, ParseError
from wbedit.jsonc import parse_jsonc, read_jsonc, strip_comments, validate_json


def test_line_comment_keeps_newline() -> None:
    assert strip_comments("// c\nX") == "\nX"


def test_line_comment_at_end_of_input_emits_nothing() -> None:
    assert strip_comments('{"a": 1} // trailing') == '{"a": 1} '


def test_line_comment_preserves_line_count() -> None:
    text = '{\n  // one\n  "a": 1, // two\n  // three\n  "b": 2\n}\n'
    assert strip_comments(text).count("\n") == text.count("\n")


def test_block_comment_removed() -> None:
    assert strip_comments('{/* x */"a": 1}') == '{"a": 1}'


def test_multiline_block_comment_removed() -> None:
    text = '{\n  /* This is a\n     multi-line comment */\n  "key": "value"\n}'
    out = strip_comments(text)
    assert "multi-line" not in out
    assert json.loads(out) == {"key": "value"}


def test_unterminated_block_comment_consumes_rest() -> None:
    assert strip_comments("a/* never closes") == "a"


def test_block_comments_do_not_nest() -> None:
    assert strip_comments("a/* outer /* inner */b*/") == "ab*/"


def test_lone_slash_is_kept() -> None:
    assert strip_comments("a / b /") == "a / b /"


@pytest.mark.parametrize(
    "literal",
    [
        '"// not a comment"',
        '"http://example.com/path"',
        '"/* not a block */"',
        '"~/.config/*/style.css"',
    ],
)
def test_comment_markers_inside_strings_survive(literal: str) -> None:
    assert strip_comments(literal) == literal


def test_escaped_quote_does_not_end_string() -> None:
    text = '{"key": "a\\"b//c"}'
    assert strip_comments(text) == text
    assert json.loads(strip_comments(text)) == {"key": 'a"b//c'}


def test_escaped_backslash_before_quote_ends_string() -> None:
    text = '{"path": "C:\\\\"} // comment'
    assert strip_comments(text) == '{"path": "C:\\\\"} '


def test_text_without_comments_is_unchanged() -> None:
    text = '{"modules-left": ["cpu", "memory"], "height": 30}'
    assert strip_comments(text) == text
    assert strip_comments(strip_comments(text)) == text


def test_waybar_example_strips_and_parses() -> None:
    text = (
        '{\n  // cpu module\n  "modules-left": ["cpu"], /* inline */ "height": 30\n}'
    )
    stripped = strip_comments(text)
    assert stripped == '{\n  \n  "modules-left": ["cpu"],  "height": 30\n}'
    assert json.loads(stripped) == {"modules-left": ["cpu"], "height": 30}


def test_round_trip_with_comments() -> None:
    value = {
        "layer": "top",
        "modules-right": ["clock"],
        "clock": {"format": "{:%H:%M}"},
    }
    text = "// header\n" + json.dumps(value, indent=2).replace(
        '"layer"', '/* position */ "layer"'
    )
    assert parse_jsonc(text) == value


def test_validate_json_accepts_strict_json() -> None:
    validate_json('{"a": [1, 2, {"b": null}]}')


def test_validate_json_rejects_trailing_comma() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        validate_json('{"a":1,}')
    assert excinfo.value.kind == "Validation"
    assert "Invalid JSON" in excinfo.value.message
    assert "line 1" in excinfo.value.message


def test_validate_json_rejects_comments() -> None:
    with pytest.raises(ConfigValidationError):
        validate_json('{"a": 1} // nope')


def test_parse_jsonc_reports_parser_diagnostic() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_jsonc('{\n  // ok\n  "a": \n}')
    assert excinfo.value.message.startswith("Failed to parse JSON:")
    assert "line 4" in excinfo.value.message


def test_read_jsonc(tmp_path: Path) -> None:
    p = tmp_path / "config.jsonc"
    p.write_text('{\n  /* block */\n  "layer": "top" // end\n}\n', encoding="utf-8")
    assert read_jsonc(p) == {"layer": "top"}


def test_read_jsonc_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        read_jsonc(tmp_path / "missing.jsonc")
