# SPDX-License-Identifier: MPL-2.0
import pytest

from copyplop.placement import PlacementResolver, frontmatter_end, has_markdown_heading


@pytest.fixture
def resolver(config_factory):
    return PlacementResolver(
        config_factory(
            files={
                "below_frontmatter": [".md", ".html.markdown"],
                "placement_exceptions": {"xml_declaration": True, "markdown_heading": True},
            }
        )
    )


@pytest.mark.parametrize(
    "lines, filename, offset",
    [
        (["package main"], "main.go", 0),
        (["#!/bin/bash", "echo hi"], "run.sh", 1),
        (['<?xml version="1.0"?>', "<root/>"], "pom.xml", 1),
        (["---", "title: X", "---", "Body"], "page.md", 3),
        (["---", "title: X", "---", "Body"], "page.html.markdown", 3),
        (["---", "title: X", "---", "Body"], "config.go", 0),
        (["---", "title: X", "no closing fence"], "page.md", 0),
        (["# Title", "", "Text"], "README.md", 1),
        (["# Title", "", "Text"], "script.py", 0),
        (["---", "title: X", "---", "# Title", "Text"], "page.md", 4),
        (["## Subtitle", "Text"], "README.md", 0),
        ([], "empty.md", 0),
    ],
)
def test_resolve_offset(resolver, lines, filename, offset):
    assert resolver.resolve_offset(lines, filename) == offset


def test_exceptions_disabled_by_default(config):
    resolver = PlacementResolver(config)
    assert resolver.resolve_offset(['<?xml version="1.0"?>', "<a/>"], "a.xml") == 0
    assert resolver.resolve_offset(["# Title", "Text"], "README.md") == 0


def test_frontmatter_end():
    assert frontmatter_end(["---", "a: b", "---", "x"], 0) == 3
    assert frontmatter_end(["x", "---", "a: b", "---"], 1) == 4
    assert frontmatter_end(["x"], 0) == 0


def test_markdown_heading():
    assert has_markdown_heading(["# Title"])
    assert not has_markdown_heading(["#Title"])
    assert not has_markdown_heading([])
