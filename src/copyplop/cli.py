# SPDX-License-Identifier: MPL-2.0
"""Command line interface for copyplop."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

import orjson

from .checker import Checker
from .config import Config, CopyplopError, load_config
from .fixer import Fixer
from .version import version_tag

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copyplop",
        description="Manage copyright headers across codebases.",
    )
    parser.add_argument("--config", help="config file (default is .copyplop.yaml)")
    parser.add_argument("-p", "--path", default=".", help="path to process")
    parser.add_argument("-j", "--jobs", type=int, default=1, help="files processed in parallel")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=version_tag())

    sub = parser.add_subparsers(dest="command", required=True)
    check = sub.add_parser("check", help="Check for missing or incorrect copyright headers")
    check.add_argument("--format", choices=("text", "json"), default="text", help="report format")
    sub.add_parser("fix", help="Fix missing or incorrect copyright headers")
    sub.add_parser("version", help="Print the version number of copyplop")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


class CopyplopCLI:
    """Terminal interface with predictable exit codes."""

    def __init__(self, config: Optional[Config] = None, out: Optional[TextIO] = None) -> None:
        """Create a new CLI wrapper.

        Args:
            config: Preloaded configuration; read from ``--config`` when omitted.
            out: Stream for user-facing output, stdout by default.
        """
        self.config = config
        self.out = out or sys.stdout

    def execute(self, args: List[str]) -> int:
        """Single entry point with semantic exit codes."""
        options = build_parser().parse_args(args)
        configure_logging(options.verbose)

        if options.command == "version":
            self._print(version_tag())
            return EXIT_OK

        try:
            config = self.config or load_config(options.config)
            if options.command == "check":
                return self._check(config, options)
            return self._fix(config, options)
        except CopyplopError as exc:
            logger.debug("Run aborted", exc_info=True)
            self._print(f"Error: {exc}")
            return EXIT_ERROR

    # Internal helpers -----------------------------------------------------
    def _print(self, message: str) -> None:
        print(message, file=self.out)

    def _check(self, config: Config, options: argparse.Namespace) -> int:
        issues = Checker(config).run(options.path, jobs=options.jobs)
        if options.format == "json":
            payload = {"issues": [issue.to_dict() for issue in issues], "count": len(issues)}
            self._print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
            return EXIT_ISSUES if issues else EXIT_OK

        if not issues:
            self._print("✓ All files have correct copyright headers")
            return EXIT_OK
        for issue in issues:
            self._print(str(issue))
        self._print(f"\nFound {len(issues)} files with copyright issues")
        return EXIT_ISSUES

    def _fix(self, config: Config, options: argparse.Namespace) -> int:
        result = Fixer(config).run(options.path, jobs=options.jobs)
        if result.changed == 0:
            self._print("✓ No files needed fixing")
        if result.fixed:
            self._print(f"✓ Fixed {result.fixed} files")
        if result.added:
            self._print(f"✓ Added headers to {result.added} files")
        for issue in result.errors:
            self._print(f"✗ {issue}")
        return EXIT_ERROR if result.errors else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    return CopyplopCLI().execute(sys.argv[1:] if argv is None else argv)
