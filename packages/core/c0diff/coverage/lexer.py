"""Line lexer for C-family sources.

Blanks out string, character and comment spans so that declaration
patterns and brace counting only ever see code. The blanked text keeps the
raw line's column layout, so a position found in it slices the raw line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from typing import Optional, Tuple


class LexMode(str, Enum):
    """Lexical state at a line boundary"""
    CODE = "code"
    STRING = "string"
    VERBATIM_STRING = "verbatim_string"
    RAW_STRING = "raw_string"
    TEMPLATE_STRING = "template_string"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


# Modes that can never continue onto the next line
_LINE_LOCAL_MODES = {LexMode.LINE_COMMENT}

_VERBATIM_PREFIX_RE = re.compile(r'@\$?"|\$@"')


@dataclass(frozen=True)
class ScannedLine:
    """A raw source line together with its code-only rendition."""

    raw: str
    code: str
    mode_after: LexMode
    is_directive: bool = False

    @property
    def brace_delta(self) -> int:
        return self.code.count("{") - self.code.count("}")

    def trimmed(self) -> Tuple[str, str]:
        """Return ``(code, raw)`` with the leading blank run removed from both."""
        offset = len(self.code) - len(self.code.lstrip())
        return self.code[offset:].rstrip(), self.raw[offset:]


def _quoted_end(line: str, start: int, quote: str) -> Optional[int]:
    """Index of the unescaped closing ``quote`` after ``start`` on this line."""
    i = start + 1
    while i < len(line):
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c == quote:
            return i
        i += 1
    return None


def scan_line(line: str, mode: LexMode = LexMode.CODE) -> ScannedLine:
    """Lex one line starting in ``mode``.

    Args:
        line: Raw source line without its line terminator.
        mode: Lexical state carried over from the previous line.

    Returns:
        ScannedLine whose ``code`` has every non-code character replaced by a
        space (quote delimiters are kept) and whose ``mode_after`` is the
        state to carry into the next line.
    """
    if mode == LexMode.CODE and line.lstrip().startswith("#"):
        return ScannedLine(line, " " * len(line), mode, is_directive=True)

    out = []
    i = 0
    n = len(line)

    while i < n:
        c = line[i]
        nxt = line[i + 1] if i + 1 < n else ""

        if mode == LexMode.BLOCK_COMMENT:
            if c == "*" and nxt == "/":
                out.append("  ")
                i += 2
                mode = LexMode.CODE
            else:
                out.append(" ")
                i += 1
            continue

        if mode in (LexMode.STRING, LexMode.TEMPLATE_STRING):
            closing = '"' if mode == LexMode.STRING else "`"
            if c == "\\":
                out.append(" " * len(line[i : i + 2]))
                i += 2
            elif c == closing:
                out.append(c)
                i += 1
                mode = LexMode.CODE
            else:
                out.append(" ")
                i += 1
            continue

        if mode == LexMode.VERBATIM_STRING:
            if c == '"' and nxt == '"':
                out.append("  ")
                i += 2
            elif c == '"':
                out.append(c)
                i += 1
                mode = LexMode.CODE
            else:
                out.append(" ")
                i += 1
            continue

        if mode == LexMode.RAW_STRING:
            if line.startswith('"""', i):
                out.append('"""')
                i += 3
                mode = LexMode.CODE
            else:
                out.append(" ")
                i += 1
            continue

        # code
        if c == "/" and nxt == "/":
            out.append(" " * (n - i))
            mode = LexMode.LINE_COMMENT
            break
        if c == "/" and nxt == "*":
            out.append("  ")
            i += 2
            mode = LexMode.BLOCK_COMMENT
            continue
        if line.startswith('"""', i):
            out.append('"""')
            i += 3
            mode = LexMode.RAW_STRING
            continue
        verbatim = _VERBATIM_PREFIX_RE.match(line, i)
        if verbatim:
            out.append(verbatim.group(0))
            i = verbatim.end()
            mode = LexMode.VERBATIM_STRING
            continue
        if c == '"':
            out.append(c)
            i += 1
            mode = LexMode.STRING
            continue
        if c == "`":
            out.append(c)
            i += 1
            mode = LexMode.TEMPLATE_STRING
            continue
        if c == "'":
            end = _quoted_end(line, i, "'")
            if end is not None:
                out.append("'" + " " * (end - i - 1) + "'")
                i = end + 1
                continue

        out.append(c)
        i += 1

    if mode in _LINE_LOCAL_MODES:
        mode = LexMode.CODE
    return ScannedLine(line, "".join(out), mode)
