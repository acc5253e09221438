# SPDX-License-Identifier: MPL-2.0
"""Shared traversal for the check and fix runners."""
from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Generic, List, Optional, TypeVar, Union

from .classifier import ContentTypeClassifier
from .config import Config
from .engine import NormalizationEngine
from .files import list_files, should_process
from .matcher import PatternMatcher
from .placement import PlacementResolver
from .render import HeaderRenderer

logger = logging.getLogger(__name__)

R = TypeVar("R")


class BaseRunner(ABC, Generic[R]):
    """Walks the candidate files and feeds each one to ``process_file``.

    Files are independent of each other, so with ``jobs > 1`` they are
    processed on a thread pool; ``record`` is the only shared mutation and is
    serialized with a lock.
    """

    operation = "processing"

    def __init__(self, config: Config, engine: Optional[NormalizationEngine] = None) -> None:
        self.config = config
        self.matcher = PatternMatcher(config)
        self.classifier = ContentTypeClassifier(config)
        self.engine = engine or NormalizationEngine(
            config,
            matcher=self.matcher,
            renderer=HeaderRenderer(config),
            resolver=PlacementResolver(config),
        )
        self._lock = threading.Lock()

    def candidate_files(self, path: Union[str, Path]) -> List[str]:
        files = list_files(path, self.config)
        selected = [f for f in files if should_process(f, self.config, self.matcher)]
        logger.info("%s %d of %d files under %s", self.operation.capitalize(), len(selected), len(files), path)
        return selected

    def run(self, path: Union[str, Path] = ".", jobs: int = 1) -> R:
        """Process every candidate file under ``path`` and return the aggregate."""
        result = self.new_result()
        files = self.candidate_files(path)
        if jobs <= 1 or len(files) <= 1:
            for file in files:
                self._handle(file, result)
            return result

        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(self._handle, file, result) for file in files]
            try:
                for future in futures:
                    future.result()
            except BaseException as exc:
                # Pending files are dropped; in-flight ones finish before the pool exits.
                logger.warning("Stopping %s after %s", self.operation, type(exc).__name__)
                for future in futures:
                    future.cancel()
                raise
        return result

    def _handle(self, file: str, result: R) -> None:
        outcome = self.process_file(file)
        if outcome is not None:
            with self._lock:
                self.record(result, outcome)

    @abstractmethod
    def new_result(self) -> R:
        """Fresh aggregate for one run."""

    @abstractmethod
    def process_file(self, file: str):
        """Handle one file; the return value is passed to ``record``."""

    @abstractmethod
    def record(self, result: R, outcome) -> None:
        """Fold one file's outcome into the aggregate."""
