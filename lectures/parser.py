"""Markdown parser producing a hierarchical syntax tree."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from lectures.citations import parse_page_string
from lectures.nodes import ListType, Node, NodeType, TableRow
from lectures.textops import (
    DEFAULT_INDENT_UNIT,
    clean_title,
    convert_latex_math_delimiters,
    detect_indent_unit,
    escape_dollar_signs,
    split_by_pipes_outside_math,
    unwrap_backtick_math,
)

logger = logging.getLogger(__name__)

# Whitespace as the markdown sources define it: ASCII only.
_WS = r"[\t\n\f\r ]"

_DISPLAY_WITH_REFERENCE = re.compile(rf"^\$\$([^$]+)\$\${_WS}*(\[\^[0-9]+\][.,]?)(.*)$")
_INLINE_WITH_REFERENCE = re.compile(rf"^\$([^$]+)\${_WS}*(\[\^[0-9]+\][.,]?)(.*)$")
_HEADING = re.compile(rf"^(#{{1,6}}){_WS}+(.+)$")
_UNORDERED_ITEM = re.compile(rf"^({_WS}*)[*+-]{_WS}+(.+)$")
_ORDERED_ITEM = re.compile(
    rf"^({_WS}*)(\*{{0,2}}|_{{0,2}})([0-9]+)\.(\*{{0,2}}|_{{0,2}}){_WS}+(.*)$"
)
_LONE_INLINE_EQUATION = re.compile(r"^\$([^$]+)\$$")
_ALIGNMENT_ROW = re.compile(r"^[:\-| ]+$")
_FOOTNOTE = re.compile(rf"^\[\^([0-9]+)\]:{_WS}+(.+)$")
_FOOTNOTE_METADATA = re.compile(
    rf"^(.*?){_WS}*\({_WS}*`?([^`,\t\n\f\r )]+)`?"
    rf"(?:(?:{_WS}*,{_WS}*)|{_WS}+)?"
    rf"(?:([a-zA-Z]{{1,2}}\.?{_WS}*([0-9\u2013\-, ]+)))?{_WS}*\)$"
)
_EMBEDDED_EQUATION = re.compile(r"(\${1,2})([^$]+)(\${1,2})")

_FENCE = "```"
_DISPLAY_FENCE = "$$"


class Parser:
    """Turns markdown text into a document tree of sections, lists and blocks."""

    def __init__(self, indent_unit: int = DEFAULT_INDENT_UNIT) -> None:
        self.indent_unit = indent_unit

    def parse(self, markdown: str) -> Node:
        """Parse markdown text into a document node."""
        markdown = unwrap_backtick_math(markdown)
        markdown = convert_latex_math_delimiters(markdown)

        lines = markdown.split("\n")
        self.indent_unit = detect_indent_unit(lines)

        elements: List[Node] = []
        index = 0
        while index < len(lines):
            block = self._parse_block(lines, index)
            if block is not None:
                node, index = block
                elements.append(node)
            else:
                element = self._parse_element(lines[index])
                if element is not None:
                    if element.type == NodeType.PARAGRAPH:
                        elements.extend(self._split_paragraph_equations(element))
                    else:
                        if element.type == NodeType.LIST_ITEM:
                            element.content = escape_dollar_signs(element.content)
                        elements.append(element)
            index += 1

        top_level = _nest_list_items(elements)
        return Node(type=NodeType.DOCUMENT, children=_build_sections(top_level))

    def _parse_block(self, lines: List[str], start: int) -> Optional[Tuple[Node, int]]:
        """Try the multi-line constructs; return the node and its last line index."""
        for block_parser in (
            _parse_code_block,
            _parse_display_equation,
            _parse_table,
            _parse_footnote,
        ):
            block = block_parser(lines, start)
            if block is not None:
                return block
        return None

    def _parse_element(self, line: str) -> Optional[Node]:
        trimmed = line.strip()
        if trimmed in ("", "---"):
            return None

        if "[^" in trimmed:
            for pattern in (_DISPLAY_WITH_REFERENCE, _INLINE_WITH_REFERENCE):
                match = pattern.match(trimmed)
                if match:
                    return Node(type=NodeType.DISPLAY_EQUATION, content=match.group(1).strip())

        match = _HEADING.match(trimmed)
        if match:
            level = len(match.group(1))
            title = clean_title(match.group(2))
            logger.debug("Parsed heading level=%d title=%r raw=%r", level, title, trimmed)
            return Node(type=NodeType.HEADING, content=title, level=level)

        match = _UNORDERED_ITEM.match(line)
        if match:
            return Node(
                type=NodeType.LIST_ITEM,
                content=match.group(2),
                depth=len(match.group(1)) // self.indent_unit,
                list_type=ListType.UNORDERED,
            )

        match = _ORDERED_ITEM.match(line)
        if match:
            indent, prefix, number, suffix, rest = match.groups()
            unit = self.indent_unit or DEFAULT_INDENT_UNIT
            return Node(
                type=NodeType.LIST_ITEM,
                content=prefix + suffix + rest,
                depth=len(indent) // unit,
                list_type=ListType.ORDERED,
                index=int(number),
            )

        match = _LONE_INLINE_EQUATION.match(trimmed)
        if match:
            return Node(type=NodeType.DISPLAY_EQUATION, content=match.group(1).strip())

        return Node(type=NodeType.PARAGRAPH, content=trimmed)

    def _split_paragraph_equations(self, paragraph: Node) -> List[Node]:
        """Pull embedded equations out of a paragraph into their own nodes."""
        content = paragraph.content
        parts: List[Node] = []
        last = 0
        for match in _EMBEDDED_EQUATION.finditer(content):
            before = content[last:match.start()].strip()
            if before:
                parts.append(Node(type=NodeType.PARAGRAPH, content=escape_dollar_signs(before)))
            parts.append(Node(type=NodeType.DISPLAY_EQUATION, content=match.group(2).strip()))
            last = match.end()

        after = content[last:].strip()
        if after:
            parts.append(Node(type=NodeType.PARAGRAPH, content=escape_dollar_signs(after)))

        if not parts:
            paragraph.content = escape_dollar_signs(paragraph.content)
            return [paragraph]
        return parts


def _parse_code_block(lines: List[str], start: int) -> Optional[Tuple[Node, int]]:
    if not lines[start].strip().startswith(_FENCE):
        return None
    for end in range(start + 1, len(lines)):
        if lines[end].strip() == _FENCE:
            return Node(type=NodeType.CODE_BLOCK, content="\n".join(lines[start + 1:end])), end
    return None


def _parse_display_equation(lines: List[str], start: int) -> Optional[Tuple[Node, int]]:
    if lines[start].strip() != _DISPLAY_FENCE:
        return None
    for end in range(start + 1, len(lines)):
        if lines[end].strip() == _DISPLAY_FENCE:
            node = Node(
                type=NodeType.DISPLAY_EQUATION,
                content="\n".join(lines[start + 1:end]),
                is_multiline=True,
            )
            return node, end
    return None


def _table_cells(line: str) -> List[str]:
    return [escape_dollar_signs(cell) for cell in split_by_pipes_outside_math(line)]


def _parse_table(lines: List[str], start: int) -> Optional[Tuple[Node, int]]:
    if start + 1 >= len(lines):
        return None
    header = lines[start].strip()
    alignment = lines[start + 1].strip()
    if "|" not in header or "|" not in alignment:
        return None
    if not _ALIGNMENT_ROW.match(alignment):
        return None

    rows = [TableRow(cells=_table_cells(header), is_header=True)]
    current = start + 2
    while current < len(lines):
        line = lines[current].strip()
        if "|" not in line:
            break
        rows.append(TableRow(cells=_table_cells(line), is_header=False))
        current += 1

    return Node(type=NodeType.TABLE, rows=rows), current - 1


def _parse_footnote(lines: List[str], start: int) -> Optional[Tuple[Node, int]]:
    match = _FOOTNOTE.match(lines[start].strip())
    if not match:
        return None

    number = int(match.group(1))
    full_content = match.group(2).strip()
    metadata = _FOOTNOTE_METADATA.match(full_content)
    logger.debug("Footnote metadata content=%r matched=%s", full_content, metadata is not None)

    if metadata:
        node = Node(
            type=NodeType.FOOTNOTE,
            footnote_number=number,
            content=metadata.group(1).strip(),
            source_file=metadata.group(2).strip(),
            source_pages=parse_page_string(metadata.group(4) or ""),
        )
        return node, start

    return Node(type=NodeType.FOOTNOTE, content=full_content, footnote_number=number), start


def _nest_list_items(elements: List[Node]) -> List[Node]:
    """Move deeper list items under the preceding shallower one."""
    stack: List[Node] = []
    top_level: List[Node] = []
    for element in elements:
        if element.type == NodeType.LIST_ITEM:
            while stack and stack[-1].depth >= element.depth:
                stack.pop()
            nested = bool(stack)
            if nested:
                stack[-1].children.append(element)
            stack.append(element)
            if nested:
                continue
        top_level.append(element)
    return top_level


def _build_sections(elements: List[Node]) -> List[Node]:
    """Turn headings into sections that own the elements following them."""
    result: List[Node] = []
    stack: List[Node] = []
    for element in elements:
        if element.type == NodeType.HEADING:
            section = Node(type=NodeType.SECTION, title=element.content, level=element.level)
            while stack and stack[-1].level >= element.level:
                stack.pop()
            (stack[-1].children if stack else result).append(section)
            stack.append(section)
        else:
            (stack[-1].children if stack else result).append(element)
    return result