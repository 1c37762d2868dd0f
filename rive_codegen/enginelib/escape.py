"""Quoting helpers for text that ends up inside generated string literals."""
from __future__ import annotations

_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    '"': '\\"',
    "\\": "\\\\",
}


def _utf16_units(code: int):
    if code <= 0xFFFF:
        return (code,)
    code -= 0x10000
    return (0xD800 | (code >> 10), 0xDC00 | (code & 0x3FF))


def escape_string(text: str) -> str:
    output = []
    for char in text:
        replacement = _ESCAPES.get(char)
        if replacement is not None:
            output.append(replacement)
        elif char.isprintable():
            output.append(char)
        else:
            output.extend(f"\\u{unit:04x}" for unit in _utf16_units(ord(char)))
    return "".join(output)
