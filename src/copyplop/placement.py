# SPDX-License-Identifier: MPL-2.0
"""Where a header may start: shebang, XML declaration, frontmatter, heading."""
from __future__ import annotations

from typing import Sequence

from .config import Config

MARKDOWN_SUFFIXES = (".md", ".markdown")
FRONTMATTER_FENCE = "---"


def has_shebang(lines: Sequence[str]) -> bool:
    return bool(lines) and lines[0].startswith("#!")


def has_xml_declaration(lines: Sequence[str]) -> bool:
    return bool(lines) and lines[0].lstrip().startswith("<?xml")


def has_markdown_heading(lines: Sequence[str]) -> bool:
    """First line is a level-one ``# Title`` heading."""
    if not lines:
        return False
    trimmed = lines[0].strip()
    return trimmed.startswith("# ")


def is_markdown(filename: str) -> bool:
    return filename.endswith(MARKDOWN_SUFFIXES)


def frontmatter_end(lines: Sequence[str], start: int) -> int:
    """Index after the closing ``---`` of a block opening at ``start``, else ``start``."""
    if start >= len(lines) or lines[start].strip() != FRONTMATTER_FENCE:
        return start
    for i in range(start + 1, len(lines)):
        if lines[i].strip() == FRONTMATTER_FENCE:
            return i + 1
    return start


class PlacementResolver:
    """Computes the placement offset for a file's header."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def wants_frontmatter(self, filename: str) -> bool:
        return any(filename.endswith(ext) for ext in self.config.files.below_frontmatter)

    def resolve_offset(self, lines: Sequence[str], filename: str) -> int:
        """Zero-based index of the first line the header may occupy.

        Exceptions are applied in a fixed order (shebang, XML declaration,
        frontmatter, markdown heading), each starting where the previous one
        stopped.
        """
        exceptions = self.config.files.placement_exceptions
        offset = 0

        if has_shebang(lines):
            offset = 1

        if offset < len(lines) and exceptions.xml_declaration and has_xml_declaration(lines[offset:]):
            offset += 1

        if offset < len(lines) and self.wants_frontmatter(filename):
            offset = frontmatter_end(lines, offset)

        if (
            offset < len(lines)
            and exceptions.markdown_heading
            and is_markdown(filename)
            and has_markdown_heading(lines[offset:])
        ):
            offset += 1

        return offset
