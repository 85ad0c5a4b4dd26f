from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from wbedit.errors import ConfigValidationError, ParseError, from_os_error


def strip_comments(text: str) -> str:
    """Strip // and /* */ comments while preserving string literals.

    Only double-quoted strings are recognised. A line comment keeps its
    terminating newline so line numbers in parser diagnostics still match the
    source; an unterminated block comment swallows the rest of the input.
    Block comments do not nest.

    **Example**
    - `strip_comments('// c\\nX') -> '\\nX'`
    - `strip_comments('{"url": "http://a"} // x') -> '{"url": "http://a"} '`
    """

    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    escaped = False

    while i < n:
        ch = text[i]

        if ch == '"' and not escaped:
            in_string = not in_string
            out.append(ch)
            i += 1
            continue

        if in_string and ch == "\\":
            escaped = not escaped
            out.append(ch)
            i += 1
            continue
        escaped = False

        if not in_string and ch == "/" and i + 1 < n:
            # Line comment
            if text[i + 1] == "/":
                end = text.find("\n", i + 2)
                if end == -1:
                    break
                out.append("\n")
                i = end + 1
                continue

            # Block comment
            if text[i + 1] == "*":
                end = text.find("*/", i + 2)
                if end == -1:
                    break
                i = end + 2
                continue

        out.append(ch)
        i += 1

    return "".join(out)


def validate_json(text: str) -> None:
    """Raise `ConfigValidationError` unless `text` is strict JSON."""

    try:
        json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigValidationError(f"Invalid JSON: {exc}") from exc


def parse_jsonc(text: str) -> Any:
    """Strip comments from `text` and parse it, raising `ParseError` on failure."""

    try:
        return json.loads(strip_comments(text))
    except json.JSONDecodeError as exc:
        raise ParseError(f"Failed to parse JSON: {exc}") from exc


def read_jsonc(path: Path) -> Any:
    """Read a JSONC file and return the parsed value."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise from_os_error(exc, str(path)) from exc
    return parse_jsonc(raw)
