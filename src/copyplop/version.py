# SPDX-License-Identifier: MPL-2.0
"""Package version helpers."""
from __future__ import annotations

from packaging.version import Version

__version__ = "0.10.0"


def version() -> str:
    """Normalized version string, e.g. ``0.10.0``."""
    return str(Version(__version__))


def version_tag() -> str:
    """Version as printed by the CLI, e.g. ``v0.10.0``."""
    return f"v{version()}"
