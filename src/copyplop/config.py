# SPDX-License-Identifier: MPL-2.0
"""Configuration models and loading for copyplop."""
from __future__ import annotations

import logging
import os
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".copyplop.yaml"
CONFIG_ENV_VAR = "COPYPLOP_CONFIG"


class CopyplopError(Exception):
    """Base exception for copyplop errors."""
    pass


class ConfigError(CopyplopError):
    """Raised when configuration cannot be loaded or rendered."""
    pass


def _this_year() -> int:
    return date.today().year


def normalize_extension_key(ext: str) -> str:
    """Turn ``.html.markdown`` into the ``html_markdown`` lookup key."""
    return ext.lstrip(".").replace(".", "_")


class ThirdPartyAction(str, Enum):
    """Where foreign copyright lines end up relative to our header."""
    LEAVE = "leave"
    ABOVE = "above"
    BELOW = "below"
    REPLACE = "replace"


class CopyrightSettings(BaseModel):
    """Holder and year information for the copyright line."""
    holder: str = Field("", description="Copyright holder name")
    start_year: int = Field(default_factory=_this_year, description="First year of the copyright")
    current_year: int = Field(default_factory=_this_year, description="Most recent year of the copyright")
    format: str = Field("Copyright {holder} {years}", description="Template for the copyright text")

    @property
    def years(self) -> str:
        if self.start_year == self.current_year:
            return str(self.current_year)
        return f"{self.start_year}, {self.current_year}"


class LicenseSettings(BaseModel):
    """License line rendered under the copyright line."""
    enabled: bool = Field(False, description="Emit a license line")
    identifier: str = Field("", description="License identifier, e.g. MPL-2.0")
    format: str = Field("SPDX-License-Identifier: {identifier}", description="Template for the license text")


class PlacementExceptions(BaseModel):
    """Structural lines allowed to precede the header."""
    xml_declaration: bool = Field(False, description="Keep <?xml ...?> above the header")
    markdown_heading: bool = Field(False, description="Keep a leading '# Title' above the header")


class SmartIndicator(BaseModel):
    """Content and filename hints voting for one candidate extension."""
    content: List[str] = Field(default_factory=list, description="Substrings searched in file content")
    filename: List[str] = Field(default_factory=list, description="Substrings searched in the filename")


class FilesSettings(BaseModel):
    """Which files are processed and how they are commented."""
    extensions: List[str] = Field(default_factory=list, description="Extensions eligible for processing")
    smart_extensions: List[str] = Field(
        default_factory=list, description="Extensions whose real type is detected from content"
    )
    smart_indicators: Dict[str, SmartIndicator] = Field(
        default_factory=dict, description="Ordered scoring rules keyed by candidate extension"
    )
    smart_default: str = Field(".go", description="Extension used when smart detection is undecided")
    ignore_patterns: List[str] = Field(default_factory=list, description="Globs that are never processed")
    include_paths: List[str] = Field(default_factory=list, description="Globs restricting processing")
    exclude_paths: List[str] = Field(default_factory=list, description="Globs excluded from processing")
    comment_styles: Dict[str, str] = Field(default_factory=dict, description="Comment prefix per extension")
    below_frontmatter: List[str] = Field(
        default_factory=list, description="Extensions whose header goes below YAML frontmatter"
    )
    placement_exceptions: PlacementExceptions = Field(default_factory=PlacementExceptions)
    git_tracked: bool = Field(False, description="Only consider files tracked by git")

    @field_validator("comment_styles")
    @classmethod
    def _normalize_style_keys(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {normalize_extension_key(k): v for k, v in value.items()}


class DetectionSettings(BaseModel):
    """Rules for recognizing existing headers."""
    skip_generated: bool = Field(False, description="Skip files that look generated")
    generated_patterns: List[str] = Field(default_factory=list, description="Regexes marking generated files")
    replace_patterns: List[str] = Field(default_factory=list, description="Regexes for headers to replace")
    max_scan_lines: int = Field(0, ge=0, description="Header window size; 0 scans the whole file")
    require_at_top: bool = Field(False, description="Report headers found below the top position")


class ThirdPartySettings(BaseModel):
    """Policy for copyright lines belonging to other holders."""
    action: ThirdPartyAction = Field(ThirdPartyAction.LEAVE, description="Placement of third-party lines")
    patterns: List[str] = Field(default_factory=list, description="Regexes identifying third-party lines")


class Config(BaseModel):
    """Top-level copyplop configuration."""
    copyright: CopyrightSettings = Field(default_factory=CopyrightSettings)
    license: LicenseSettings = Field(default_factory=LicenseSettings)
    files: FilesSettings = Field(default_factory=FilesSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    third_party: ThirdPartySettings = Field(default_factory=ThirdPartySettings)

    def comment_style(self, ext: str) -> Optional[str]:
        """Configured comment prefix for an extension, if any."""
        return self.files.comment_styles.get(normalize_extension_key(ext)) or None


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Pick the configuration file: explicit path, environment, then default."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path(DEFAULT_CONFIG_FILE)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load and validate a YAML configuration file.

    Args:
        path: Configuration file. Falls back to ``$COPYPLOP_CONFIG`` and then
            ``.copyplop.yaml`` in the working directory.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """
    config_path = resolve_config_path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {config_path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    logger.debug("Loaded configuration from %s", config_path)
    return config
