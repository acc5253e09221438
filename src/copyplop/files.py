# SPDX-License-Identifier: MPL-2.0
"""File enumeration, filtering, reading and atomic writing."""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .classifier import ContentTypeClassifier
from .config import Config, CopyplopError
from .engine import join_lines, split_lines
from .matcher import PatternMatcher

logger = logging.getLogger(__name__)

SKIP_DIRS = {".git"}


class FileListError(CopyplopError):
    """Raised when candidate files cannot be enumerated."""
    pass


@dataclass
class SourceFile:
    """A file's decoded lines plus what is needed to write it back."""
    path: str
    raw: bytes
    lines: List[str]
    newline: str
    trailing_newline: bool
    extension: str
    effective_name: str
    smart: bool = False

    def render(self, lines: List[str]) -> bytes:
        text = join_lines(lines, self.trailing_newline)
        return text.encode("utf-8", errors="surrogateescape")


def list_git_files(path: Union[str, Path]) -> List[str]:
    """Files tracked by git under ``path``."""
    try:
        output = subprocess.run(
            ["git", "ls-files", str(path)],
            check=True,
            capture_output=True,
            text=True,
        ).stdout
    except (OSError, subprocess.CalledProcessError) as exc:
        raise FileListError(f"git ls-files failed for {path}: {exc}") from exc
    return [line for line in output.splitlines() if line]


def list_all_files(path: Union[str, Path]) -> List[str]:
    """Every regular file below ``path`` (or ``path`` itself if it is a file)."""
    root = Path(path)
    if root.is_file():
        return [str(root)]
    if not root.is_dir():
        raise FileListError(f"Path not found: {path}")
    files: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in sorted(filenames):
            files.append(os.path.join(dirpath, filename))
    return files


def list_files(path: Union[str, Path], config: Config) -> List[str]:
    if config.files.git_tracked:
        return list_git_files(path)
    return list_all_files(path)


def _matching_suffix(path: str, suffixes: List[str]) -> Optional[str]:
    """Longest configured suffix that ``path`` ends with."""
    best: Optional[str] = None
    for suffix in suffixes:
        if suffix and path.endswith(suffix) and (best is None or len(suffix) > len(best)):
            best = suffix
    return best


def should_process(path: str, config: Config, matcher: PatternMatcher) -> bool:
    """Extension allow-list first, then the path globs."""
    files = config.files
    if _matching_suffix(path, files.extensions + files.smart_extensions) is None:
        return False
    return matcher.should_process_path(path)


def effective_extension(path: str, config: Config) -> tuple:
    """Extension used to pick a comment style, and whether it is a smart one.

    Compound extensions such as ``.html.markdown`` win over ``.markdown``.
    """
    ext = os.path.splitext(path)[1]
    configured = _matching_suffix(path, config.files.extensions)
    if configured and len(configured) > len(ext):
        ext = configured
    smart = _matching_suffix(path, config.files.smart_extensions)
    if smart and len(smart) >= len(ext):
        return smart, True
    return ext, False


def load_source(path: str, config: Config, classifier: ContentTypeClassifier) -> Optional[SourceFile]:
    """Read a file and resolve its effective extension.

    Returns ``None`` for binary content under a smart extension.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "rb") as f:
        raw = f.read()

    ext, smart = effective_extension(path, config)
    effective_name = path
    if smart:
        detected = classifier.classify(raw, path)
        if not detected:
            logger.debug("Skipping binary file %s", path)
            return None
        logger.debug("Detected %s as %s", path, detected)
        ext = detected
        effective_name = f"dummy{detected}"

    text = raw.decode("utf-8", errors="surrogateescape")
    lines, newline, trailing = split_lines(text)
    return SourceFile(
        path=path,
        raw=raw,
        lines=lines,
        newline=newline,
        trailing_newline=trailing,
        extension=ext,
        effective_name=effective_name,
        smart=smart,
    )


def write_atomic(path: str, data: bytes) -> None:
    """Replace ``path`` with ``data`` without leaving a partially written file."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".copyplop-", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
