# SPDX-License-Identifier: MPL-2.0
"""copyplop - keep copyright and license headers consistent across a codebase."""

from .version import __version__

# Import key components for easier access
from .config import Config, ConfigError, CopyplopError, ThirdPartyAction, load_config
from .checker import Checker, Issue, IssueKind
from .classifier import ContentTypeClassifier
from .engine import NormalizationEngine, Outcome
from .fixer import FixResult, Fixer
from .matcher import PatternMatcher
from .placement import PlacementResolver
from .render import HeaderRenderer, TemplateError

__all__ = [
    "__version__",
    "Checker",
    "Config",
    "ConfigError",
    "ContentTypeClassifier",
    "CopyplopError",
    "FixResult",
    "Fixer",
    "HeaderRenderer",
    "Issue",
    "IssueKind",
    "NormalizationEngine",
    "Outcome",
    "PatternMatcher",
    "PlacementResolver",
    "TemplateError",
    "ThirdPartyAction",
    "load_config",
]
