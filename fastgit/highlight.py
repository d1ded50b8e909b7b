"""Terminal-safe text and diff-pane coloring.

Control bytes are escaped before anything reaches the screen. Diff content
is syntax-colored with Pygments.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import PurePath

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DEFAULT_STYLE = "monokai"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> TerminalFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = DEFAULT_STYLE
    return TerminalFormatter(style=style)


def _lexer_for(path: PurePath, sample: str):
    try:
        return get_lexer_for_filename(path.name, sample, stripnl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False)


def colorize_code_lines(lines: list[str], path: PurePath, style: str = DEFAULT_STYLE) -> list[str]:
    """Syntax-color ``lines`` as one block, keeping a 1:1 line mapping."""
    if not lines:
        return lines
    source = "\n".join(lines)
    rendered = pygments_highlight(source, _lexer_for(path, source), _formatter_for_style(style))
    if rendered.endswith("\n"):
        rendered = rendered[:-1]
    rendered_lines = rendered.split("\n")
    if len(rendered_lines) != len(lines):
        return lines
    return rendered_lines

