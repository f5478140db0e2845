"""Citation markers of the form {{{description-file-pPAGES}}} and page lists."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from itertools import groupby
from typing import Iterable, List, Tuple

logger = logging.getLogger(__name__)

_CITATION = re.compile(r"\s*\{\{\{(.*?)\s*\}\}\}", re.ASCII)
_PAGE_SUFFIX = re.compile(r"-p([\d\s\-,]+)\Z", re.ASCII)
_FILE_WITH_EXTENSION = re.compile(r"(.*)-([^\-]+?\.[a-z0-9]+)\Z", re.ASCII)
_INTEGER = re.compile(r"[+-]?[0-9]+")

_EN_DASH = "\u2013"


@dataclass
class ParsedCitation:
    """Metadata extracted from one citation marker."""

    number: int
    description: str
    file: str
    pages: List[int] = field(default_factory=list)


def _to_int(text: str) -> int:
    """Parse a plain decimal integer, giving 0 when it is not one."""
    return int(text) if _INTEGER.fullmatch(text) else 0


def _split_marker(content: str) -> Tuple[str, str, str]:
    """Split marker content into description, file name and page string."""
    page_string = ""
    remaining = content
    page_match = _PAGE_SUFFIX.search(content)
    if page_match:
        page_string = page_match.group(1)
        remaining = content[: len(content) - len(page_match.group(0))]

    file_match = _FILE_WITH_EXTENSION.match(remaining)
    if file_match:
        return file_match.group(1).strip(), file_match.group(2).strip(), page_string

    description, dash, filename = remaining.rpartition("-")
    if dash:
        return description.strip(), filename.strip(), page_string
    return remaining, "unknown", page_string


def parse_citations(text: str) -> Tuple[str, List[ParsedCitation]]:
    """Replace citation markers with footnote references [^N].

    Returns the rewritten text and the citations in order of appearance.
    """
    matches = list(_CITATION.finditer(text))
    logger.debug("parse_citations: text_length=%d matches=%d", len(text), len(matches))

    citations: List[ParsedCitation] = []
    result = text
    for number, match in enumerate(matches, start=1):
        description, filename, page_string = _split_marker(match.group(1).strip())
        citations.append(
            ParsedCitation(
                number=number,
                description=description,
                file=filename,
                pages=parse_page_string(page_string),
            )
        )
        # The marker goes together with the whitespace before it.
        result = result.replace(match.group(0), f"[^{number}]", 1)

    return result, citations


def parse_page_string(page_string: str) -> List[int]:
    """Expand a page list such as "1, 2, 5-10" into page numbers."""
    pages: List[int] = []
    if not page_string:
        return pages

    for part in page_string.split(","):
        part = part.strip().removeprefix("p")
        if "-" in part or _EN_DASH in part:
            bounds = part.replace(_EN_DASH, "-").split("-")
            if len(bounds) == 2:
                start = _to_int(bounds[0].strip())
                end = _to_int(bounds[1].strip())
                if start > 0 and end >= start:
                    pages.extend(range(start, end + 1))
        else:
            number = _to_int(part)
            if number > 0:
                pages.append(number)
    return pages


def format_page_numbers(pages: Iterable[int]) -> str:
    """Collapse page numbers into ranges, e.g. [1, 2, 3, 5] -> "1–3, 5"."""
    unique = sorted(set(pages))
    ranges = []
    # Consecutive pages share the same difference between value and position.
    for _, run in groupby(enumerate(unique), key=lambda pair: pair[1] - pair[0]):
        numbers = [page for _, page in run]
        if len(numbers) == 1:
            ranges.append(str(numbers[0]))
        else:
            ranges.append(f"{numbers[0]}{_EN_DASH}{numbers[-1]}")
    return ", ".join(ranges)