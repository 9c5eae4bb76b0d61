from __future__ import annotations

import re

# Not every character is allowed in XML 1.0 documents:
#   Char ::= #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]
# https://www.w3.org/TR/REC-xml/#NT-Char
_CONTROL_CHARS = re.compile(r"[\x01-\x08\x0b\x0c\x0e-\x1f]")


def _hex_escape(match: re.Match) -> str:
    return "<{:02x}>".format(ord(match.group(0)))


def xmlsafe(text: str | None) -> str:
    """Replace control characters that XML cannot carry with a visible ``<hh>`` marker.

    The XML reserved characters are left alone, ElementTree escapes those when
    the report is rendered.
    """
    if not text:
        return ""
    return _CONTROL_CHARS.sub(_hex_escape, text)
