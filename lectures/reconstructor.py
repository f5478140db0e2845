"""Render a markdown syntax tree back into markdown text."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from lectures.citations import ParsedCitation, format_page_numbers, parse_citations
from lectures.i18n import get_label
from lectures.nodes import ListType, Node, NodeType

_SPACE_BEFORE_REFERENCE = re.compile(r"[ \t]+\[\^")
_ORDERED_MARKER = re.compile(r"^[0-9]+\.")


class _Lines(list):
    """Accumulated output lines."""

    def ensure_blank(self) -> None:
        if self and self[-1] != "":
            self.append("")


class Reconstructor:
    """Converts a document tree into markdown text."""

    def __init__(self, language: str = "en") -> None:
        self.language = language
        self.indent_unit = 4

    def reconstruct(self, node: Optional[Node]) -> str:
        """Render a node and its children as markdown ending in a newline."""
        lines = _Lines()
        self._render(node, lines)
        result = _SPACE_BEFORE_REFERENCE.sub("[^", "\n".join(lines))
        return result.strip() + "\n"

    def append_citations(self, content: str, citations: Iterable[ParsedCitation]) -> str:
        """Append footnote definitions for the citations to the content."""
        citations = list(citations)
        if not citations:
            return content

        lines = _Lines([content.strip()])
        for citation in citations:
            self._render(
                Node(
                    type=NodeType.FOOTNOTE,
                    footnote_number=citation.number,
                    content=citation.description,
                    source_file=citation.file,
                    source_pages=citation.pages,
                ),
                lines,
            )
        return "\n".join(lines)

    def parse_citations(self, text: str) -> Tuple[str, List[ParsedCitation]]:
        """Replace {{{...}}} citation markers with footnote references."""
        return parse_citations(text)

    def _page_info(self, pages: List[int]) -> str:
        if not pages:
            return ""
        key = "page_label" if len(pages) == 1 else "pages_label"
        return f"{get_label(self.language, key)} {format_page_numbers(pages)}"

    def _render(self, node: Optional[Node], lines: _Lines) -> None:
        if node is None:
            return
        kind = node.type

        if kind == NodeType.DOCUMENT:
            for child in node.children:
                self._render(child, lines)

        elif kind == NodeType.SECTION:
            if node.title:
                lines.ensure_blank()
                lines.append(f"{'#' * node.level} {node.title}")
            for child in node.children:
                self._render(child, lines)

        elif kind == NodeType.PARAGRAPH:
            lines.ensure_blank()
            lines.append(node.content)

        elif kind == NodeType.HEADING:
            lines.ensure_blank()
            lines.append(f"{'#' * node.level} {node.content}")

        elif kind == NodeType.LIST_ITEM:
            self._render_list_item(node, lines)

        elif kind == NodeType.FOOTNOTE:
            lines.ensure_blank()
            text = node.content
            # Metadata already written into the text is not repeated.
            if node.source_file and node.source_file not in text:
                page_info = self._page_info(node.source_pages)
                if page_info:
                    text = f"{text} (`{node.source_file}`, {page_info})"
                else:
                    text = f"{text} (`{node.source_file}`)"
            lines.append(f"[^{node.footnote_number}]: {text}")

        elif kind == NodeType.TABLE:
            lines.ensure_blank()
            for row in node.rows:
                lines.append("| " + " | ".join(row.cells) + " |")
                if row.is_header:
                    lines.append("| " + " | ".join("---" for _ in row.cells) + " |")

        elif kind == NodeType.DISPLAY_EQUATION:
            lines.ensure_blank()
            if node.is_multiline:
                lines.extend(["$$", node.content, "$$"])
            else:
                lines.append(f"$${node.content}$$")

        elif kind == NodeType.CODE_BLOCK:
            lines.ensure_blank()
            lines.extend(["```", node.content, "```"])

        elif kind == NodeType.HORIZONTAL_RULE:
            lines.ensure_blank()
            lines.append("---")

        elif kind == NodeType.IMAGE:
            self._render_image(node, lines)

    def _render_list_item(self, node: Node, lines: _Lines) -> None:
        indent = " " * (node.depth * self.indent_unit)
        bullet = f"{node.index}. " if node.list_type == ListType.ORDERED else "- "

        # A top-level list is separated from what precedes it by a blank line.
        if node.depth == 0 and lines:
            previous = lines[-1].strip()
            if not previous.startswith("-") and not _ORDERED_MARKER.match(previous):
                lines.ensure_blank()

        lines.append(f"{indent}{bullet}{node.content}")
        for child in node.children:
            self._render(child, lines)

    def _render_image(self, node: Node, lines: _Lines) -> None:
        lines.ensure_blank()
        caption = ""
        if node.source_file:
            page_info = self._page_info(node.source_pages)
            caption = f"<code>{node.source_file}</code>"
            if page_info:
                caption = f"{caption}, {page_info}"

        lines.append("<figure>")
        lines.append(f'  <img src="{node.content}" alt="" />')
        if caption:
            lines.append(f"  <figcaption>{caption.strip()}</figcaption>")
        lines.append("</figure>")