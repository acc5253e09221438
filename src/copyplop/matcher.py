# SPDX-License-Identifier: MPL-2.0
"""Regex and glob matching for paths and header lines."""
from __future__ import annotations

import logging
import re
import string
from typing import Dict, List, Optional, Pattern, Sequence

from wcmatch import glob

from .config import Config
from .render import BLOCK_COMMENT_PREFIX, HTML_COMMENT_PREFIX, HTML_COMMENT_SUFFIX

logger = logging.getLogger(__name__)

SPDX_PATTERN = r'SPDX-License-Identifier:\s*"?[^"]*"?'

_YEAR = r"\d{4}"
_YEAR_FIELDS = {"start_year", "current_year"}

# "*" stays within one path segment, "**" spans segments, "{a,b}" alternates.
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB


def _normalize_path(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


class PatternMatcher:
    """Evaluates configured patterns, compiling each one once."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._regex_cache: Dict[str, Optional[Pattern[str]]] = {}
        self._own_header_re: Optional[Pattern[str]] = self._build_own_header_regex()

    # Generic matching -------------------------------------------------------
    def _compile(self, pattern: str) -> Optional[Pattern[str]]:
        if pattern not in self._regex_cache:
            try:
                self._regex_cache[pattern] = re.compile(pattern)
            except re.error as exc:
                logger.debug("Ignoring invalid regex %r: %s", pattern, exc)
                self._regex_cache[pattern] = None
        return self._regex_cache[pattern]

    def matches(self, pattern: str, text: str) -> bool:
        """Regex search; invalid patterns never match."""
        compiled = self._compile(pattern)
        return bool(compiled and compiled.search(text))

    def matches_any(self, patterns: Sequence[str], text: str) -> bool:
        return any(self.matches(p, text) for p in patterns)

    def matches_path(self, pattern: str, path: str) -> bool:
        """Glob match where a directory pattern also covers its descendants."""
        path = _normalize_path(path)
        pattern = _normalize_path(pattern)
        candidates = [pattern]
        if "**" not in pattern:
            candidates.append(pattern.rstrip("/") + "/**")
        if pattern.endswith("/*"):
            candidates.append(pattern[:-2] + "/**")
        return glob.globmatch(path, candidates, flags=GLOB_FLAGS)

    def matches_any_path(self, patterns: Sequence[str], path: str) -> bool:
        return any(self.matches_path(p, path) for p in patterns)

    # Path filtering ---------------------------------------------------------
    def should_process_path(self, path: str) -> bool:
        """Apply ignore, exclude and include globs.

        No includes means everything not excluded is processed; with includes,
        a file must match one of them and no exclude.
        """
        files = self.config.files
        if self.matches_any_path(files.ignore_patterns, path):
            return False
        if self.matches_any_path(files.exclude_paths, path):
            return False
        if files.include_paths:
            return self.matches_any_path(files.include_paths, path)
        return True

    # Line recognizers -------------------------------------------------------
    def is_generated(self, lines: Sequence[str]) -> bool:
        detection = self.config.detection
        if not detection.skip_generated or not lines:
            return False
        head = lines[:2]
        return any(self.matches_any(detection.generated_patterns, line) for line in head)

    def should_replace(self, line: str) -> bool:
        return self.matches_any(self.config.detection.replace_patterns, line)

    def is_third_party(self, line: str) -> bool:
        """Third-party copyright line; replace patterns take precedence."""
        if self.should_replace(line):
            return False
        return self.matches_any(self.config.third_party.patterns, line)

    @staticmethod
    def comment_text(line: str, comment_prefix: str) -> Optional[str]:
        """Text of a comment line in the given style, or ``None`` for non-comments."""
        if comment_prefix == BLOCK_COMMENT_PREFIX:
            if not line.startswith(" * "):
                return None
            return line[3:].strip()
        trimmed = line.strip()
        if not trimmed.startswith(comment_prefix):
            return None
        text = trimmed[len(comment_prefix):]
        if comment_prefix == HTML_COMMENT_PREFIX and text.endswith(HTML_COMMENT_SUFFIX):
            text = text[: -len(HTML_COMMENT_SUFFIX)]
        return text.strip()

    def is_spdx_line(self, line: str, comment_prefix: str) -> bool:
        """SPDX identifier written as a comment in the given style."""
        content = self.comment_text(line, comment_prefix)
        if content is None:
            return False
        return bool(self._compile(SPDX_PATTERN).search(content))

    def is_own_copyright_line(self, line: str, comment_prefix: str) -> bool:
        """Our own copyright comment, whatever its year values are."""
        content = self.comment_text(line, comment_prefix)
        return content is not None and self.is_own_copyright_text(content)

    def is_own_copyright_text(self, text: str) -> bool:
        """Comment text that starts like our copyright notice."""
        if self._own_header_re is not None and self._own_header_re.match(text):
            return True
        holder = self.config.copyright.holder.strip()
        if not holder or not text.startswith("Copyright"):
            return False
        return holder in text and re.search(_YEAR, text) is not None

    def _build_own_header_regex(self) -> Optional[Pattern[str]]:
        """Regex for the copyright template with any four-digit years."""
        settings = self.config.copyright
        parts: List[str] = []
        has_year = False
        try:
            for literal, field, _spec, _conv in string.Formatter().parse(settings.format):
                parts.append(re.escape(literal))
                if field is None:
                    continue
                if field in _YEAR_FIELDS:
                    parts.append(_YEAR)
                    has_year = True
                elif field == "years":
                    parts.append(rf"{_YEAR}(?:,\s*{_YEAR})?")
                    has_year = True
                elif field == "holder":
                    parts.append(re.escape(settings.holder))
                else:
                    return None
        except ValueError as exc:
            logger.debug("Copyright template cannot be turned into a matcher: %s", exc)
            return None
        if not has_year:
            return None
        return re.compile("".join(parts))
