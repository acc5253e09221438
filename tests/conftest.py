import pytest

from copyplop.config import Config


def make_config(**overrides) -> Config:
    """IBM-style configuration used across the test-suite, with overrides per section."""
    data = {
        "copyright": {
            "holder": "IBM Corp.",
            "start_year": 2014,
            "current_year": 2025,
            "format": "Copyright {holder} {start_year}, {current_year}",
        },
        "license": {
            "enabled": True,
            "identifier": "MPL-2.0",
            "format": "SPDX-License-Identifier: {identifier}",
        },
        "files": {
            "extensions": [".go", ".sh", ".py", ".md", ".yml", ".java"],
            "comment_styles": {"go": "//", "sh": "#"},
        },
        "detection": {
            "skip_generated": True,
            "generated_patterns": ["Code generated"],
            "replace_patterns": ["Copyright.*HashiCorp"],
            "max_scan_lines": 20,
            "require_at_top": True,
        },
        "third_party": {
            "action": "above",
            "patterns": ["Copyright.*Oracle"],
        },
    }
    for section, values in overrides.items():
        data.setdefault(section, {}).update(values)
    return Config.model_validate(data)


@pytest.fixture
def config() -> Config:
    """Fresh default configuration for each test."""
    return make_config()


@pytest.fixture
def config_factory():
    """Build configurations with per-section overrides."""
    return make_config
