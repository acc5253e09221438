# SPDX-License-Identifier: MPL-2.0
"""Header normalization engine.

Given the lines of a file, the engine finds the header window (the lines
starting at the placement offset, bounded by ``detection.max_scan_lines``),
classifies every line in it, decides whether the file already carries the
canonical header and otherwise rebuilds the file with the canonical header in
place. Lines outside the header window are never removed, so documentation
that merely mentions copyright words further down a file is left alone.

Applying the engine to its own output yields the same output.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .config import Config, ThirdPartyAction
from .matcher import SPDX_PATTERN, PatternMatcher
from .placement import PlacementResolver
from .render import BLOCK_COMMENT_PREFIX, HTML_COMMENT_PREFIX, HTML_COMMENT_SUFFIX, HeaderRenderer

logger = logging.getLogger(__name__)

_BLOCK_CLOSERS = {BLOCK_COMMENT_PREFIX: "*/", HTML_COMMENT_PREFIX: HTML_COMMENT_SUFFIX}


class LineKind(str, Enum):
    """Classification of a line inside the header window."""
    COPYRIGHT_CURRENT = "copyright_current"
    LICENSE_CURRENT = "license_current"
    REPLACE = "replace"
    OWN_STALE = "own_stale"
    THIRD_PARTY = "third_party"
    SPDX_STALE = "spdx_stale"
    CONTENT = "content"


class Outcome(str, Enum):
    """What happened to a file."""
    UNCHANGED = "unchanged"
    ADDED = "added"
    FIXED = "fixed"
    SKIPPED = "skipped"


class RewriteState(Enum):
    """States of the body reconstruction."""
    COPYING = "copying"
    INSIDE_REMOVED_BLOCK = "inside_removed_block"
    SKIP_BLANK_AFTER_REMOVAL = "skip_blank_after_removal"


@dataclass
class HeaderScan:
    """Result of classifying the header window."""
    offset: int
    limit: int
    copyright_line: str
    license_line: str
    header: List[str]
    kinds: List[LineKind] = field(default_factory=list)

    def kind(self, index: int) -> LineKind:
        if self.offset <= index < self.limit:
            return self.kinds[index - self.offset]
        return LineKind.CONTENT

    def first(self, kind: LineKind) -> Optional[int]:
        for i, k in enumerate(self.kinds):
            if k is kind:
                return self.offset + i
        return None

    @property
    def copyright_index(self) -> Optional[int]:
        return self.first(LineKind.COPYRIGHT_CURRENT)

    @property
    def license_index(self) -> Optional[int]:
        return self.first(LineKind.LICENSE_CURRENT)

    @property
    def is_correct(self) -> bool:
        """Canonical copyright present, and canonical license when enabled."""
        if self.copyright_index is None:
            return False
        return not self.license_line or self.license_index is not None

    @property
    def has_stale_header(self) -> bool:
        return any(k in (LineKind.REPLACE, LineKind.OWN_STALE, LineKind.SPDX_STALE) for k in self.kinds)

    @property
    def has_header_material(self) -> bool:
        return any(k is not LineKind.CONTENT for k in self.kinds)

    def third_party_lines(self, lines: Sequence[str]) -> List[str]:
        return [lines[self.offset + i] for i, k in enumerate(self.kinds) if k is LineKind.THIRD_PARTY]


@dataclass
class Normalization:
    """Outcome of normalizing one file's lines."""
    lines: List[str]
    outcome: Outcome
    scan: Optional[HeaderScan] = None

    @property
    def changed(self) -> bool:
        return self.outcome in (Outcome.ADDED, Outcome.FIXED)


def split_lines(text: str) -> Tuple[List[str], str, bool]:
    """Split text on ``\\n``, returning (lines, dominant_newline, has_trailing_newline).

    A ``\\r`` before the ``\\n`` stays part of its line, so mixed-newline files
    round-trip byte for byte; comparisons strip it. The dominant newline is
    the style used for lines the engine inserts.
    """
    crlf = text.count("\r\n")
    newline = "\r\n" if crlf > text.count("\n") - crlf else "\n"
    trailing = text.endswith("\n")
    if trailing:
        text = text[:-1]
    return text.split("\n"), newline, trailing


def join_lines(lines: Sequence[str], trailing: bool) -> str:
    text = "\n".join(lines)
    return text + "\n" if trailing else text


class NormalizationEngine:
    """Scans, decides and rewrites file headers."""

    def __init__(
        self,
        config: Config,
        matcher: Optional[PatternMatcher] = None,
        renderer: Optional[HeaderRenderer] = None,
        resolver: Optional[PlacementResolver] = None,
    ) -> None:
        self.config = config
        self.matcher = matcher or PatternMatcher(config)
        self.renderer = renderer or HeaderRenderer(config)
        self.resolver = resolver or PlacementResolver(config)

    # Scanning ---------------------------------------------------------------
    def window_limit(self, lines: Sequence[str], offset: int, header_height: int) -> int:
        """End of the header window; never shorter than the header itself."""
        bound = self.config.detection.max_scan_lines
        if bound <= 0:
            return len(lines)
        return min(offset + max(bound, header_height), len(lines))

    def classify_line(self, line: str, copyright_line: str, license_line: str, prefix: str) -> LineKind:
        trimmed = line.strip()
        if trimmed and trimmed == copyright_line.strip():
            return LineKind.COPYRIGHT_CURRENT
        if license_line and trimmed and trimmed == license_line.strip():
            return LineKind.LICENSE_CURRENT
        if self.matcher.should_replace(line):
            return LineKind.REPLACE
        if self.matcher.is_own_copyright_line(line, prefix):
            return LineKind.OWN_STALE
        if self.matcher.is_third_party(line):
            return LineKind.THIRD_PARTY
        if self.matcher.is_spdx_line(line, prefix):
            return LineKind.SPDX_STALE
        return LineKind.CONTENT

    def inspect(self, lines: Sequence[str], ext: str, filename: Optional[str] = None) -> HeaderScan:
        """Resolve placement, render the header and classify the header window.

        Raises:
            TemplateError: If a header template cannot be expanded.
        """
        filename = filename or f"dummy{ext}"
        copyright_line = self.renderer.render_copyright(ext)
        license_line = self.renderer.render_license(ext)
        header = self.renderer.header_block(copyright_line, license_line, ext)
        prefix = self.renderer.comment_prefix(ext)

        offset = self.resolver.resolve_offset(lines, filename)
        limit = self.window_limit(lines, offset, len(header))
        # Under "below" third-party lines sit above the header, so the window
        # grows with each one found.
        below = self.config.third_party.action is ThirdPartyAction.BELOW
        scan = HeaderScan(
            offset=offset,
            limit=limit,
            copyright_line=copyright_line,
            license_line=license_line,
            header=header,
        )
        third_party = 0
        i = offset
        while i < limit:
            kind = self.classify_line(lines[i], copyright_line, license_line, prefix)
            scan.kinds.append(kind)
            if below and kind is LineKind.THIRD_PARTY:
                third_party += 1
                limit = max(limit, self.window_limit(lines, offset, len(header) + third_party))
            i += 1
        scan.limit = limit
        return scan

    # Rewriting --------------------------------------------------------------
    def normalize(
        self,
        lines: Sequence[str],
        ext: str,
        filename: Optional[str] = None,
        newline: str = "\n",
    ) -> Normalization:
        """Return the normalized lines of a file and what was done to them.

        ``newline`` is the file's dominant newline; inserted lines follow it.
        """
        if self.matcher.is_generated(lines):
            return Normalization(lines=list(lines), outcome=Outcome.SKIPPED)

        scan = self.inspect(lines, ext, filename)
        if scan.is_correct:
            return Normalization(lines=list(lines), outcome=Outcome.UNCHANGED, scan=scan)

        new_lines = self.rewrite(lines, scan, newline)
        if new_lines == list(lines):
            return Normalization(lines=new_lines, outcome=Outcome.UNCHANGED, scan=scan)
        outcome = Outcome.FIXED if scan.has_header_material else Outcome.ADDED
        return Normalization(lines=new_lines, outcome=outcome, scan=scan)

    def rewrite(self, lines: Sequence[str], scan: HeaderScan, newline: str = "\n") -> List[str]:
        """Rebuild the file around the canonical header."""
        action = self.config.third_party.action
        third_party = scan.third_party_lines(lines)
        # Lines are split on "\n"; CRLF files carry the "\r" inside each line.
        eol = "\r" if newline == "\r\n" else ""
        header = [line + eol for line in scan.header]

        result = list(lines[: scan.offset])
        if action is ThirdPartyAction.ABOVE:
            result.extend(header)
            result.extend(third_party)
        elif action is ThirdPartyAction.BELOW:
            result.extend(third_party)
            result.extend(header)
        else:
            result.extend(header)
        if not (scan.offset < len(lines) and not lines[scan.offset].strip()):
            result.append(eol)

        result.extend(self._copy_body(lines, scan))
        return result

    def _removable(self, scan: HeaderScan, index: int) -> bool:
        kind = scan.kind(index)
        if kind is LineKind.CONTENT:
            return False
        if kind is LineKind.THIRD_PARTY:
            return self.config.third_party.action is not ThirdPartyAction.LEAVE
        return True

    def _is_header_material(self, scan: HeaderScan, index: int, text: str) -> bool:
        stripped = text.strip()
        if not stripped or stripped == "*":
            return True
        return (
            self._removable(scan, index)
            or self.matcher.matches(SPDX_PATTERN, stripped)
            or self.matcher.is_own_copyright_text(stripped)
        )

    def _removable_block_end(self, lines: Sequence[str], scan: HeaderScan, start: int) -> Optional[int]:
        """Closing index of a comment block at ``start`` holding only header material."""
        closer = _BLOCK_CLOSERS.get(lines[start].strip())
        if closer is None:
            return None
        found_header = False
        for j in range(start + 1, scan.limit):
            trimmed = lines[j].strip()
            closing = trimmed.endswith(closer)
            text = trimmed[: -len(closer)] if closing else trimmed
            if not self._is_header_material(scan, j, text):
                return None
            if text.strip() and text.strip() != "*":
                found_header = True
            if closing:
                return j if found_header else None
        return None

    def _copy_body(self, lines: Sequence[str], scan: HeaderScan) -> List[str]:
        body: List[str] = []
        state = RewriteState.COPYING
        block_end = -1
        for i in range(scan.offset, len(lines)):
            line = lines[i]
            if i >= scan.limit:
                body.append(line)
                continue

            if state is RewriteState.INSIDE_REMOVED_BLOCK:
                if i == block_end:
                    state = RewriteState.SKIP_BLANK_AFTER_REMOVAL
                continue

            if state is RewriteState.SKIP_BLANK_AFTER_REMOVAL:
                state = RewriteState.COPYING
                if not line.strip():
                    continue

            end = self._removable_block_end(lines, scan, i)
            if end is not None:
                logger.debug("Dropping header comment block at lines %d-%d", i, end)
                state = RewriteState.INSIDE_REMOVED_BLOCK
                block_end = end
                continue

            if self._removable(scan, i):
                state = RewriteState.SKIP_BLANK_AFTER_REMOVAL
                continue

            body.append(line)
        return body

    # Convenience ------------------------------------------------------------
    def process_content(self, content: str, ext: str, filename: Optional[str] = None) -> str:
        """Normalize in-memory content, keeping its newline style."""
        lines, newline, trailing = split_lines(content)
        result = self.normalize(lines, ext, filename, newline)
        if not result.changed:
            return content
        return join_lines(result.lines, trailing)
