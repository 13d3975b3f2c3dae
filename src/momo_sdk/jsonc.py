"""Parsing for JSON with comments and trailing commas (JSONC)."""

from __future__ import annotations

import json
import re
from typing import Any

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def strip_jsonc(content: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas.

    Comments inside string literals are preserved. Newlines within comments
    are kept so that parse errors still point at the right line.
    """

    out: list[str] = []
    in_string = False
    in_line_comment = False
    in_block_comment = False
    i = 0
    length = len(content)

    while i < length:
        ch = content[i]
        nxt = content[i + 1] if i + 1 < length else ""

        if in_string:
            out.append(ch)
            if ch == "\\" and nxt:
                out.append(nxt)
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if in_line_comment:
            if ch == "\n":
                in_line_comment = False
                out.append(ch)
            i += 1
            continue

        if in_block_comment:
            if ch == "*" and nxt == "/":
                in_block_comment = False
                i += 2
                continue
            if ch == "\n":
                out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch == "/" and nxt == "/":
            in_line_comment = True
            i += 2
            continue
        elif ch == "/" and nxt == "*":
            in_block_comment = True
            i += 2
            continue
        else:
            out.append(ch)
        i += 1

    return _remove_trailing_commas("".join(out))


def _remove_trailing_commas(content: str) -> str:
    # Only touch commas outside string literals.
    parts: list[str] = []
    last = 0
    for match in re.finditer(r'"(?:\\.|[^"\\])*"', content):
        parts.append(_TRAILING_COMMA.sub(r"\1", content[last : match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(_TRAILING_COMMA.sub(r"\1", content[last:]))
    return "".join(parts)


def loads(content: str) -> Any:
    """Parse a JSONC document. Raises ``ValueError`` on malformed input."""

    return json.loads(strip_jsonc(content))
