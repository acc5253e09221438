# SPDX-License-Identifier: MPL-2.0
import pytest

from copyplop.matcher import PatternMatcher


@pytest.fixture
def matcher(config):
    return PatternMatcher(config)


@pytest.mark.parametrize(
    "pattern, path, expected",
    [
        ("*.go", "main.go", True),
        ("*.go", "pkg/main.go", False),
        ("**/*.go", "pkg/sub/main.go", True),
        ("**/*.go", "main.go", True),
        ("vendor/**", "vendor/a/b.go", True),
        ("file?.txt", "file1.txt", True),
        ("file[0-9].txt", "filex.txt", False),
        ("file[!0-9].txt", "filex.txt", True),
        ("*.{go,sh}", "run.sh", True),
        ("*.{go,sh}", "run.py", False),
        ("**/.github/**", "ci/.github/workflows/a.yml", True),
    ],
)
def test_glob_matching(matcher, pattern, path, expected):
    assert matcher.matches_path(pattern, path) is expected


def test_malformed_glob_does_not_match_like_a_valid_one(matcher):
    assert matcher.matches_path("file[0-9.txt", "file1.txt") is False


def test_directory_pattern_covers_descendants(matcher):
    assert matcher.matches_path("vendor", "vendor/pkg/file.go")
    assert matcher.matches_path("vendor/*", "vendor/pkg/file.go")
    assert matcher.matches_path("./docs", "docs/index.md")
    assert not matcher.matches_path("vendor", "src/vendor.go")


def test_should_process_path(config_factory):
    matcher = PatternMatcher(
        config_factory(
            files={
                "ignore_patterns": ["**/*.pb.go"],
                "include_paths": ["src/**"],
                "exclude_paths": ["src/legacy"],
            }
        )
    )
    assert matcher.should_process_path("src/app/main.go")
    assert not matcher.should_process_path("src/app/api.pb.go")
    assert not matcher.should_process_path("src/legacy/old.go")
    assert not matcher.should_process_path("tools/gen.go")


def test_invalid_regex_never_matches(matcher):
    assert matcher.matches("Copyright (", "Copyright (c)") is False


def test_generated_detection_looks_at_first_two_lines(matcher):
    assert matcher.is_generated(["// Code generated by x. DO NOT EDIT.", "package main"])
    assert matcher.is_generated(["", "// Code generated by x."])
    assert not matcher.is_generated(["package main", "", "// Code generated by x."])
    assert not matcher.is_generated([])


def test_replace_takes_precedence_over_third_party(matcher):
    assert matcher.is_third_party("// Copyright (c) 2025, Oracle")
    assert matcher.should_replace("// Copyright HashiCorp, Oracle")
    assert not matcher.is_third_party("// Copyright HashiCorp, Oracle")


@pytest.mark.parametrize(
    "line, prefix, expected",
    [
        ("// SPDX-License-Identifier: MPL-2.0", "//", True),
        ('# "SPDX-License-Identifier: MIT"', "#", True),
        ("SPDX-License-Identifier: MIT", "//", False),
        (" * SPDX-License-Identifier: MIT", "/**", True),
        ("// SPDX-License-Identifier: MIT", "/**", False),
        ("// just a comment", "//", False),
    ],
)
def test_spdx_line(matcher, line, prefix, expected):
    assert matcher.is_spdx_line(line, prefix) is expected


@pytest.mark.parametrize(
    "line, prefix, expected",
    [
        ("// Copyright IBM Corp. 2014, 2023", "//", True),
        ("# Copyright IBM Corp. 2020, 2021", "#", True),
        ("// Copyright 2019 IBM Corp.", "//", True),
        (" * Copyright IBM Corp. 2014, 2020", "/**", True),
        ("<!-- Copyright IBM Corp. 2014, 2020 -->", "<!--", True),
        ("// Copyright IBM Corp.", "//", False),
        ("// Copyright (c) 2025, Oracle", "//", False),
        ('const banner = "Copyright IBM Corp. 2019"', "//", False),
        ("Copyright IBM Corp. 2014, 2020", "//", False),
        ("This fork builds on work that is Copyright IBM Corp. 2019, see NOTICE.", "<!--", False),
        ("// See Copyright IBM Corp. 2019 in NOTICE", "//", False),
    ],
)
def test_own_copyright_line(matcher, line, prefix, expected):
    assert matcher.is_own_copyright_line(line, prefix) is expected


def test_own_copyright_text_inside_comment_block(matcher):
    assert matcher.is_own_copyright_text("Copyright IBM Corp. 2014, 2020")
    assert not matcher.is_own_copyright_text("Mentions Copyright IBM Corp. 2014")


def test_comment_text(matcher):
    assert matcher.comment_text("  // hello ", "//") == "hello"
    assert matcher.comment_text("<!-- hello -->", "<!--") == "hello"
    assert matcher.comment_text(" * hello", "/**") == "hello"
    assert matcher.comment_text("hello", "#") is None


def test_own_copyright_with_years_field(config_factory):
    matcher = PatternMatcher(config_factory(copyright={"format": "(c) {years} {holder}"}))
    assert matcher.is_own_copyright_line("// (c) 2020, 2024 IBM Corp.", "//")
    assert matcher.is_own_copyright_line("// (c) 2024 IBM Corp.", "//")
