"""Markdown syntax tree types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class NodeType(str, Enum):
    """Kind of element a node in the markdown tree stands for."""

    DOCUMENT = "document"
    SECTION = "section"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list_item"
    FOOTNOTE = "footnote"
    CODE_BLOCK = "code_block"
    HORIZONTAL_RULE = "horizontal_rule"
    TABLE = "table"
    DISPLAY_EQUATION = "display_equation"
    IMAGE = "image"


class ListType(str, Enum):
    """Ordered or unordered list."""

    ORDERED = "ordered"
    UNORDERED = "unordered"


class TableAlignment(str, Enum):
    """Column alignment in a table."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    NONE = "none"


@dataclass
class TableRow:
    """One row of a markdown table."""

    cells: List[str] = field(default_factory=list)
    is_header: bool = False


@dataclass
class Node:
    """A node in the markdown syntax tree."""

    type: NodeType
    content: str = ""
    title: str = ""
    level: int = 0
    list_type: Optional[ListType] = None
    depth: int = 0
    index: int = 0
    footnote_number: int = 0
    is_multiline: bool = False
    children: List["Node"] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)
    alignments: List[TableAlignment] = field(default_factory=list)
    # Metadata for citations and footnotes
    source_file: str = ""
    source_pages: List[int] = field(default_factory=list)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()