# SPDX-License-Identifier: MPL-2.0
"""Content-type detection for ambiguous ("smart") file extensions."""
from __future__ import annotations

import logging
import os
import re
from typing import Dict, Optional, Union

from .config import Config, SmartIndicator

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 512

GO_EXT = ".go"
TERRAFORM_EXT = ".tf"
MARKDOWN_EXT = ".md"
YAML_EXT = ".yaml"

_GO_MARKERS = (
    re.compile(r"^package\s+\w+\s*$", re.MULTILINE),
    re.compile(r"^func\s+[\w(]", re.MULTILINE),
    re.compile(r'^import\s+[("]', re.MULTILINE),
    re.compile(r"^type\s+\w+\s+struct\b", re.MULTILINE),
)
_HCL_MARKERS = ('resource "', 'data "', 'variable "', 'output "', 'provider "', "terraform {")
_MD_SUBHEADING = re.compile(r"^#{2,}\s", re.MULTILINE)
_MD_HEADING = re.compile(r"^#\s", re.MULTILINE)
_MD_LINK = re.compile(r"\[[^\]\n]+\]\([^)\n]+\)")
_FRONTMATTER_KEY = re.compile(r"^(?:title|description|layout|page_title|subcategory):", re.MULTILINE)


def is_binary(content: bytes) -> bool:
    """Null byte within the first 512 bytes."""
    return b"\x00" in content[:BINARY_SNIFF_BYTES]


class ContentTypeClassifier:
    """Infers the real extension of a smart-extension file from its content."""

    def __init__(self, config: Config) -> None:
        self.config = config

    @property
    def indicators(self) -> Dict[str, SmartIndicator]:
        return self.config.files.smart_indicators

    def classify(self, content: Union[bytes, str], filename: str) -> Optional[str]:
        """Return the detected extension, or ``None`` for binary content.

        Args:
            content: Raw file content.
            filename: Path or name of the file, used for filename hints.
        """
        if isinstance(content, str):
            raw = content.encode("utf-8", errors="surrogateescape")
            text = content
        else:
            raw = content
            text = content.decode("utf-8", errors="replace")

        if is_binary(raw):
            logger.debug("Binary content detected in %s", filename)
            return None

        name = os.path.basename(filename)
        if self.indicators:
            return self._score(text, name)
        return self._heuristic(text, name)

    def _score(self, text: str, name: str) -> str:
        """Highest indicator score wins; ties and zero scores use the default."""
        scores = {
            ext: sum(1 for p in rule.content if p and p in text)
            + sum(1 for p in rule.filename if p and p in name)
            for ext, rule in self.indicators.items()
        }
        best = max(scores.values(), default=0)
        winners = [ext for ext, score in scores.items() if score == best]
        if best <= 0 or len(winners) != 1:
            logger.debug("Smart detection undecided for %s (scores=%s)", name, scores)
            return self.config.files.smart_default
        return winners[0]

    def _heuristic(self, text: str, name: str) -> str:
        # HCL before markdown: '#' comments would otherwise look like headings.
        if any(marker.search(text) for marker in _GO_MARKERS):
            return GO_EXT
        lowered = name.lower()
        if any(marker in text for marker in _HCL_MARKERS) or "terraform" in lowered or ".tf." in lowered:
            return TERRAFORM_EXT
        if (
            _MD_SUBHEADING.search(text)
            or "```" in text
            or _MD_LINK.search(text)
            or (_MD_HEADING.search(text) and _FRONTMATTER_KEY.search(text))
        ):
            return MARKDOWN_EXT
        if "---" in text or ":\n" in text:
            return YAML_EXT
        if "markdown" in lowered or "md" in lowered:
            return MARKDOWN_EXT
        return GO_EXT
