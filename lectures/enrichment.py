"""Attach images of cited document pages to the sections that cite them."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Set, Tuple

from lectures.nodes import Node, NodeType

ImageResolver = Callable[[str, int], str]
"""Returns the local image path of a cited page, or an empty string if none."""

_REFERENCE = re.compile(r"\[\^([0-9]+)\]")
_ENRICHED_LEVELS = (2, 3)


def _collect_footnotes(root: Node) -> Dict[int, Tuple[str, List[int]]]:
    return {
        node.footnote_number: (node.source_file, node.source_pages)
        for node in root.walk()
        if node.type == NodeType.FOOTNOTE
    }


def _own_citations(
    section: Node, footnotes: Dict[int, Tuple[str, List[int]]]
) -> Dict[str, Set[int]]:
    """Pages cited in a section, leaving out those cited in its subsections."""
    cited: Dict[str, Set[int]] = defaultdict(set)

    def visit(node: Node) -> None:
        if node.type in (NodeType.PARAGRAPH, NodeType.LIST_ITEM):
            for match in _REFERENCE.finditer(node.content):
                info = footnotes.get(int(match.group(1)))
                if info and info[0]:
                    cited[info[0]].update(info[1])
        for child in node.children:
            if child.type != NodeType.SECTION:
                visit(child)

    visit(section)
    return cited


def enrich_with_cited_images(root: Optional[Node], resolver: Optional[ImageResolver]) -> None:
    """Append an image node for each cited page to the level 2 or 3 section
    where that page is first cited. The tree is changed in place."""
    if root is None or resolver is None:
        return

    footnotes = _collect_footnotes(root)
    inserted: Set[Tuple[str, int]] = set()

    def process(node: Node) -> None:
        if node.type != NodeType.SECTION or node.level not in _ENRICHED_LEVELS:
            for child in node.children:
                process(child)
            return

        cited = _own_citations(node, footnotes)
        images: List[Node] = []
        for filename in sorted(cited):
            for page in sorted(cited[filename]):
                key = (filename, page)
                if key in inserted:
                    continue
                image_path = resolver(filename, page)
                if image_path:
                    images.append(
                        Node(
                            type=NodeType.IMAGE,
                            content=image_path,
                            source_file=filename,
                            source_pages=[page],
                        )
                    )
                    inserted.add(key)

        node.children.extend(images)
        for child in node.children:
            if child.type == NodeType.SECTION:
                process(child)

    process(root)