# SPDX-License-Identifier: MPL-2.0
"""Rendering of copyright and license header lines."""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from .config import Config, ConfigError

logger = logging.getLogger(__name__)

HTML_COMMENT_PREFIX = "<!--"
HTML_COMMENT_SUFFIX = "-->"
BLOCK_COMMENT_PREFIX = "/**"
BLOCK_COMMENT_LINE = " * "
BLOCK_COMMENT_END = " */"

YAML_EXTENSIONS = {".yml", ".yaml"}

_FALLBACK_STYLES = {
    ".go": "//",
    ".sh": "#",
    ".py": "#",
    ".hcl": "#",
    ".tf": "#",
    ".yml": "#",
    ".yaml": "#",
    ".md": HTML_COMMENT_PREFIX,
    ".html.markdown": HTML_COMMENT_PREFIX,
}
_DEFAULT_STYLE = "//"


class TemplateError(ConfigError):
    """Raised when a header template cannot be expanded."""
    pass


def expand_template(template: str, values: Dict[str, Any]) -> str:
    """Expand ``{name}`` placeholders, turning any failure into ``TemplateError``."""
    try:
        return template.format_map(values)
    except (KeyError, IndexError, ValueError, AttributeError) as exc:
        raise TemplateError(f"Cannot expand template {template!r}: {exc!r}") from exc


class HeaderRenderer:
    """Produces the exact header lines for an effective extension."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def comment_prefix(self, ext: str) -> str:
        """Configured comment prefix, else the built-in fallback."""
        configured = self.config.comment_style(ext)
        if configured:
            return configured
        return _FALLBACK_STYLES.get(ext, _DEFAULT_STYLE)

    def is_block_style(self, ext: str) -> bool:
        return self.comment_prefix(ext) == BLOCK_COMMENT_PREFIX

    def copyright_text(self) -> str:
        settings = self.config.copyright
        return expand_template(
            settings.format,
            {
                "holder": settings.holder,
                "start_year": settings.start_year,
                "current_year": settings.current_year,
                "years": settings.years,
            },
        )

    def license_text(self) -> str:
        settings = self.config.license
        return expand_template(settings.format, {"identifier": settings.identifier})

    def render_copyright(self, ext: str) -> str:
        return self.wrap(self.copyright_text(), ext)

    def render_license(self, ext: str) -> str:
        """Rendered license line, or an empty string when licensing is off."""
        if not self.config.license.enabled:
            return ""
        return self.wrap(self.license_text(), ext)

    def wrap(self, text: str, ext: str) -> str:
        """Wrap header text in the comment style of ``ext``."""
        prefix = self.comment_prefix(ext)
        if prefix == HTML_COMMENT_PREFIX:
            return f"{prefix} {text} {HTML_COMMENT_SUFFIX}"
        if prefix == BLOCK_COMMENT_PREFIX:
            return f"{BLOCK_COMMENT_LINE}{text}"
        if ext in YAML_EXTENSIONS and ":" in text:
            text = f'"{text}"'
        return f"{prefix} {text}"

    def header_block(self, copyright_line: str, license_line: str, ext: str) -> List[str]:
        """Header lines in emission order, including block markers when needed."""
        block = [copyright_line]
        if license_line:
            block.append(license_line)
        if self.is_block_style(ext):
            return [BLOCK_COMMENT_PREFIX, *block, BLOCK_COMMENT_END]
        return block
