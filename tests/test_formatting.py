"""Tests for Markdown rendering."""

import pytest

from mcp_whistle_documentation.formatting import (
    format_feature_not_found,
    format_search_results,
    format_section,
    format_section_list,
)
from mcp_whistle_documentation.models import DocSection, SearchResult

RULES = DocSection(id="rules", title="Rules", content="Rules body.", url="https://wproxy.org/whistle/rules.html")


def test_format_section() -> None:
    """Test rendering a single section document."""
    assert format_section(RULES) == "# Rules\n\nRules body.\n\nSource: https://wproxy.org/whistle/rules.html"


def test_format_section_list() -> None:
    """Test rendering the section listing."""
    text = format_section_list([RULES])

    assert text.startswith("# Whistle documentation sections (1)")
    assert "- `rules`: [Rules](https://wproxy.org/whistle/rules.html)" in text


def test_format_section_list_empty() -> None:
    """Test rendering an empty listing."""
    assert "No Whistle documentation sections" in format_section_list([])


def test_format_search_results() -> None:
    """Test rendering numbered search results."""
    results = [
        SearchResult("rules", "Rules", "...match one...", "https://wproxy.org/whistle/rules.html"),
        SearchResult("plugins", "Plugins", "match two", "https://wproxy.org/whistle/plugins.html"),
    ]

    text = format_search_results("match", results)

    assert text.startswith('# Whistle documentation search: "match"')
    assert "Found 2 result(s)" in text
    assert "## 1. Rules\n\n...match one..." in text
    assert "## 2. Plugins" in text
    assert "[View full section](https://wproxy.org/whistle/plugins.html)" in text


def test_format_search_results_empty() -> None:
    """Test the notice when nothing matched."""
    assert format_search_results("nothing", []) == 'No results found for "nothing".'


def test_format_feature_not_found() -> None:
    """Test the notice for an unknown feature."""
    text = format_feature_not_found("websocket")

    assert '"websocket"' in text
    assert "search_whistle_docs" in text


def test_renderers_use_model_projections(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that rendering reads sections and results through their projections."""
    monkeypatch.setattr(
        DocSection, "detail", lambda self: {"title": "Projected", "content": "Body", "url": "https://p/"}
    )
    monkeypatch.setattr(
        SearchResult,
        "to_dict",
        lambda self: {"sectionId": "x", "sectionTitle": "Projected hit", "matchedContent": "hit", "url": "https://p/"},
    )

    section_text = format_section(RULES)
    search_text = format_search_results("hit", [SearchResult("rules", "Rules", "ignored", "u")])

    assert section_text == "# Projected\n\nBody\n\nSource: https://p/"
    assert "## 1. Projected hit\n\nhit" in search_text
