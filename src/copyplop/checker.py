# SPDX-License-Identifier: MPL-2.0
"""Check mode: report files whose headers are missing or wrong."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import ThirdPartyAction
from .engine import HeaderScan, LineKind
from .files import load_source
from .render import TemplateError
from .runner import BaseRunner

logger = logging.getLogger(__name__)


class IssueKind(str, Enum):
    """Problems check mode can report."""
    MISSING = "missing copyright header"
    INCORRECT = "missing or incorrect copyright header"
    MISSING_LICENSE = "missing license header"
    MISPLACED = "copyright not at top of file"
    CONFIG_ERROR = "config error"
    UNREADABLE = "could not read file"
    UNWRITABLE = "could not write file"
    EMPTY = "empty file"


@dataclass
class Issue:
    """A single file's problem."""
    file: str
    kind: IssueKind
    detail: str = ""

    @property
    def problem(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.detail}"
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "kind": self.kind.name.lower(), "problem": self.problem}

    def __str__(self) -> str:
        return f"{self.file}: {self.problem}"


class Checker(BaseRunner[List[Issue]]):
    """Finds files without the canonical header."""

    operation = "checking"

    def run(self, path: Union[str, Path] = ".", jobs: int = 1) -> List[Issue]:
        issues = super().run(path, jobs)
        issues.sort(key=lambda issue: issue.file)
        return issues

    def new_result(self) -> List[Issue]:
        return []

    def record(self, result: List[Issue], outcome: Issue) -> None:
        result.append(outcome)

    def process_file(self, file: str) -> Optional[Issue]:
        return self.check_file(file)

    def check_file(self, path: str) -> Optional[Issue]:
        try:
            source = load_source(path, self.config, self.classifier)
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return Issue(path, IssueKind.UNREADABLE)
        if source is None:
            return None
        if not source.raw:
            return Issue(path, IssueKind.EMPTY)
        return self.check_lines(path, source.lines, source.extension, source.effective_name)

    def check_lines(
        self,
        path: str,
        lines: Sequence[str],
        ext: str,
        filename: Optional[str] = None,
    ) -> Optional[Issue]:
        """Check already-decoded lines; ``None`` means the header is fine."""
        if self.matcher.is_generated(lines):
            logger.debug("Skipping generated file %s", path)
            return None

        try:
            scan = self.engine.inspect(lines, ext, filename)
        except TemplateError as exc:
            logger.warning("Cannot render header for %s: %s", path, exc)
            return Issue(path, IssueKind.CONFIG_ERROR, str(exc))

        if scan.offset >= len(lines):
            return Issue(path, IssueKind.MISSING)

        index = scan.copyright_index
        if index is None:
            if scan.has_stale_header:
                return Issue(path, IssueKind.INCORRECT)
            return Issue(path, IssueKind.MISSING)

        if self.config.detection.require_at_top and index != self._expected_index(scan):
            return Issue(path, IssueKind.MISPLACED)

        if scan.license_line and scan.license_index is None:
            return Issue(path, IssueKind.MISSING_LICENSE)

        return None

    def _expected_index(self, scan: HeaderScan) -> int:
        """Line the copyright should sit on when the header is at the top."""
        index = scan.offset + scan.header.index(scan.copyright_line)
        if self.config.third_party.action is ThirdPartyAction.BELOW:
            index += sum(1 for k in scan.kinds if k is LineKind.THIRD_PARTY)
        return index
