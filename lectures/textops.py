"""Text-level helpers used while parsing markdown: math delimiters, dollar escaping,
heading prefixes, list indentation and table cell splitting."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List

# Whitespace as the markdown sources define it: ASCII only.
_WS = r"[\t\n\f\r ]"

_BACKTICK_INLINE = re.compile(r"`\\\((.*?)\\\)`", re.DOTALL)
_BACKTICK_DISPLAY = re.compile(r"`\\\[(.*?)\\\]`", re.DOTALL)

_LATEX_INLINE = re.compile(r"\\\((.*?)\\\)", re.DOTALL)
_LATEX_DISPLAY = re.compile(r"\\\[(.*?)\\\]", re.DOTALL)
_STANDALONE_INLINE = re.compile(
    rf"^({_WS}*)\$([^$]+)\$([.,]?)({_WS}*)$", re.MULTILINE
)

_TITLE_PREFIX = re.compile(
    rf"^([A-Za-z]+{_WS}+)?([0-9]+|[IVXLCDM]+|[A-Z])[.:)]{_WS}+", re.IGNORECASE
)

_LIST_MARKER = re.compile(rf"({_WS}*)([*+-]|(?:\*{{0,2}}|_{{0,2}})[0-9]+\.){_WS}+")

_MATH_PIECE = re.compile(r"\$\$|.", re.DOTALL)

DEFAULT_INDENT_UNIT = 4


def escape_dollar_signs(text: str) -> str:
    """Put a backslash before every dollar sign that is not already escaped."""
    out: List[str] = []
    backslashes = 0
    for character in text:
        if character == "$" and backslashes % 2 == 0:
            out.append("\\")
        out.append(character)
        backslashes = backslashes + 1 if character == "\\" else 0
    return "".join(out)


def clean_title(title: str) -> str:
    """Strip numbering prefixes such as "1.", "IV:" or "Chapter 3." from a heading."""
    cleaned = _TITLE_PREFIX.sub("", title, count=1)
    if not cleaned:
        return title.strip()
    return cleaned.strip()


def detect_indent_unit(lines: Iterable[str]) -> int:
    """Guess how many spaces make up one level of list nesting."""
    counts: Counter = Counter()
    for line in lines:
        match = _LIST_MARKER.match(line)
        if match and match.group(1):
            counts[len(match.group(1))] += 1

    if not counts:
        return DEFAULT_INDENT_UNIT

    levels = sorted(counts)
    step = levels[1] - levels[0] if len(levels) >= 2 else levels[0]
    if step > 0 and all(later - earlier == step for earlier, later in zip(levels, levels[1:])):
        return step

    total = sum(counts.values())
    four_score = sum(count for level, count in counts.items() if level % 4 == 0) / total
    two_score = sum(
        count for level, count in counts.items() if level % 4 != 0 and level % 2 == 0
    ) / total

    if four_score > 0.6 or four_score > two_score:
        return 4
    return 2


def unwrap_backtick_math(markdown: str) -> str:
    """Remove code backticks around LaTeX math such as `\\(x\\)` and `\\[y\\]`."""
    markdown = _BACKTICK_INLINE.sub(lambda m: "\\(" + m.group(1) + "\\)", markdown)
    return _BACKTICK_DISPLAY.sub(lambda m: "\\[" + m.group(1) + "\\]", markdown)


def convert_latex_math_delimiters(markdown: str) -> str:
    """Turn \\(..\\) into $..$ and \\[..\\] into $$..$$.

    A line holding nothing but one inline equation is promoted to display math.
    """
    markdown = _LATEX_INLINE.sub(lambda m: "$" + m.group(1).strip() + "$", markdown)
    markdown = _LATEX_DISPLAY.sub(lambda m: "$$" + m.group(1) + "$$", markdown)
    return _STANDALONE_INLINE.sub(
        lambda m: m.group(1) + "$$" + m.group(2) + m.group(3) + "$$" + m.group(4),
        markdown,
    )


def split_by_pipes_outside_math(line: str) -> List[str]:
    """Split a table line on pipes that are not inside $..$ or $$..$$.

    Cells are stripped and empty cells are dropped.
    """
    cells: List[str] = []
    current: List[str] = []
    in_inline = False
    in_display = False

    def flush() -> None:
        cell = "".join(current).strip()
        if cell:
            cells.append(cell)
        current.clear()

    for piece in _MATH_PIECE.findall(line):
        if piece == "$$":
            in_display = not in_display
            current.append(piece)
        elif piece == "$" and not in_display:
            in_inline = not in_inline
            current.append(piece)
        elif piece == "|" and not in_inline and not in_display:
            flush()
        else:
            current.append(piece)

    flush()
    return cells