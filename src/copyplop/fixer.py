# SPDX-License-Identifier: MPL-2.0
"""Fix mode: rewrite files so they carry the canonical header."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .checker import Issue, IssueKind
from .engine import Outcome
from .files import load_source, write_atomic
from .render import TemplateError
from .runner import BaseRunner

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Aggregate counts for one fix run."""
    fixed: int = 0
    added: int = 0
    errors: List[Issue] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return self.fixed + self.added


FileFix = Tuple[str, Outcome, Optional[Issue]]


class Fixer(BaseRunner[FixResult]):
    """Adds missing headers and replaces stale ones."""

    operation = "fixing"

    def new_result(self) -> FixResult:
        return FixResult()

    def record(self, result: FixResult, outcome: FileFix) -> None:
        _path, status, issue = outcome
        if issue is not None:
            result.errors.append(issue)
        elif status is Outcome.FIXED:
            result.fixed += 1
        elif status is Outcome.ADDED:
            result.added += 1

    def process_file(self, file: str) -> FileFix:
        return self.fix_file(file)

    def fix_file(self, path: str) -> FileFix:
        """Normalize one file in place.

        Returns:
            The path, what happened to it, and an ``Issue`` when it could not
            be processed.
        """
        try:
            source = load_source(path, self.config, self.classifier)
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return path, Outcome.SKIPPED, Issue(path, IssueKind.UNREADABLE, str(exc))
        if source is None:
            return path, Outcome.SKIPPED, None

        try:
            result = self.engine.normalize(
                source.lines, source.extension, source.effective_name, source.newline
            )
        except TemplateError as exc:
            logger.warning("Cannot render header for %s: %s", path, exc)
            return path, Outcome.SKIPPED, Issue(path, IssueKind.CONFIG_ERROR, str(exc))

        if not result.changed:
            logger.debug("%s: %s", path, result.outcome.value)
            return path, result.outcome, None

        try:
            write_atomic(path, source.render(result.lines))
        except OSError as exc:
            logger.warning("Could not write %s: %s", path, exc)
            return path, Outcome.SKIPPED, Issue(path, IssueKind.UNWRITABLE, str(exc))

        logger.info("%s: header %s", path, result.outcome.value)
        return path, result.outcome, None
