"""
Properties format — ``key=value`` lines in java.util.Properties syntax.

Output is pure ASCII: every character outside printable ASCII is
written as ``\\uXXXX`` (astral characters as a UTF-16 surrogate pair),
so the bytes on disk are the same whatever encoding the caller asked
for. The encoding only matters when reading a file back.

Reader grammar (same as ``Properties.load``):
    - ``#`` / ``!`` comment lines and blank lines are skipped
    - a line ending in an odd number of backslashes continues on the
      next line, whose leading whitespace is dropped
    - the key ends at the first unescaped ``=``, ``:`` or whitespace
    - ``\\t \\n \\r \\f \\uXXXX`` are decoded, ``\\<c>`` is ``<c>``
"""

from __future__ import annotations

import re
import string
from pathlib import Path
from typing import Iterator, Mapping

from buildprops.core.errors import CannotReadFileError
from buildprops.core.formats.base import PropertiesFormat

HEADER_COMMENT = "Generated by buildprops"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"

_WRITE_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_READ_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SPECIALS = "=:#!"


# ── Writing ─────────────────────────────────────────────────────


def _escape_unicode(ch: str) -> str:
    code = ord(ch)
    if code > 0xFFFF:
        code -= 0x10000
        high = 0xD800 + (code >> 10)
        low = 0xDC00 + (code & 0x3FF)
        return f"\\u{high:04X}\\u{low:04X}"
    return f"\\u{code:04X}"


def escape(text: str, *, is_key: bool) -> str:
    """Escape a key or value for a properties line.

    Keys escape every space; values only a leading one.
    """
    out: list[str] = []
    for i, ch in enumerate(text):
        if ch == "\\":
            out.append("\\\\")
        elif ch == " ":
            out.append("\\ " if is_key or i == 0 else " ")
        elif ch in _WRITE_ESCAPES:
            out.append(_WRITE_ESCAPES[ch])
        elif ch in _SPECIALS:
            out.append("\\" + ch)
        elif ord(ch) < 0x20 or ord(ch) > 0x7E:
            out.append(_escape_unicode(ch))
        else:
            out.append(ch)
    return "".join(out)


# ── Reading ─────────────────────────────────────────────────────


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    lines = iter(_LINE_BREAK.split(text))
    for line in lines:
        line = line.lstrip(_WHITESPACE)
        if not line or line[0] in "#!":
            continue
        while _continues(line):
            line = line[:-1]
            nxt = next(lines, None)
            if nxt is None:
                break
            line += nxt.lstrip(_WHITESPACE)
        yield line


def _split_key_value(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        i += 1

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest[:1] and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def unescape(text: str) -> str:
    """Decode backslash escapes; surrogate pairs become one character.

    Raises:
        CannotReadFileError: On a malformed ``\\uXXXX`` escape.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        i += 1
        if ch != "\\":
            out.append(ch)
            continue
        if i >= n:
            break
        ch = text[i]
        i += 1
        if ch == "u":
            digits = text[i:i + 4]
            if len(digits) != 4 or not all(d in string.hexdigits for d in digits):
                raise CannotReadFileError(f"Malformed \\uxxxx encoding: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_READ_ESCAPES.get(ch, ch))

    joined = "".join(out)
    return joined.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an insertion-ordered dict (last key wins)."""
    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        result[unescape(key)] = unescape(value)
    return result


class TextPropertiesFormat(PropertiesFormat):
    """One header comment, then sorted ``key=value`` lines."""

    def __init__(self, header: str = HEADER_COMMENT):
        self._header = header

    @property
    def name(self) -> str:
        return "properties"

    def serialize(self, properties: Mapping[str, str], encoding: str) -> bytes:
        # output is escaped ASCII; encoding only applies when reading
        lines = [f"#{self._header}"]
        for key, value in properties.items():
            lines.append(f"{escape(key, is_key=True)}={escape(value, is_key=False)}")
        return ("\n".join(lines) + "\n").encode("ascii")

    def deserialize(self, path: Path, encoding: str) -> dict[str, str]:
        try:
            text = path.read_bytes().decode(encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise CannotReadFileError(f"Cannot read {path}: {e}") from e
        return parse_properties(text)
