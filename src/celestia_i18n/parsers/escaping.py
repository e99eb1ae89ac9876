"""Escape handling for quoted PO string literals."""

from __future__ import annotations

import re
from typing import Optional

# (raw, escaped) in the order they are decoded
_ENTITIES = [
    ("\0", "\\0"),
    ("\t", "\\t"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\"", "\\\""),
    ("\\", "\\\\"),
]

_UNESCAPES = {escaped[1]: raw for raw, escaped in _ENTITIES}

# A backslash followed by a \u escape (possibly truncated) or any single character
_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{0,4}|.?)", re.DOTALL)


class _MalformedEscape(ValueError):
    pass


def _decode(match: re.Match) -> str:
    token = match.group(1)
    if token.startswith("u"):
        if len(token) != 5:
            raise _MalformedEscape(match.group(0))
        value = int(token[1:], 16)
        if 0xD800 <= value <= 0xDFFF:
            raise _MalformedEscape(match.group(0))
        return chr(value)
    if token in _UNESCAPES:
        return _UNESCAPES[token]
    # Unknown escapes are kept verbatim
    return match.group(0)


def unescape(text: str) -> Optional[str]:
    """Decode a quoted literal body. Returns None on a malformed \\u escape.

    The input is scanned left to right, so an escaped backslash never
    combines with the character after it (``\\\\n`` is a backslash and an
    ``n``, not a newline).
    """
    try:
        return _ESCAPE_RE.sub(_decode, text)
    except _MalformedEscape:
        return None


def escape(text: str, ascii_only: bool = False) -> str:
    """Encode text for a quoted literal, backslash first.

    With *ascii_only*, non-ASCII characters become ``\\bXXXX``. That form is
    for display only and is not read back by :func:`unescape`.
    """
    for raw, escaped in reversed(_ENTITIES):
        text = text.replace(raw, escaped)
    if not ascii_only:
        return text
    return "".join(ch if ord(ch) < 0x80 else f"\\b{ord(ch):04x}" for ch in text)
