"""Markdown rendering of documentation cache results."""

from mcp_whistle_documentation.models import DocSection, SearchResult


def format_section(section: DocSection) -> str:
    """Render one section as a Markdown document.

    Args:
        section: Section to render.

    Returns:
        Markdown with the title as heading, the content and a source link.
    """
    detail = section.detail()
    return f"# {detail['title']}\n\n{detail['content']}\n\nSource: {detail['url']}"


def format_section_list(sections: list[DocSection]) -> str:
    """Render the section listing, one bullet per section."""
    if not sections:
        return "No Whistle documentation sections are available."
    lines = [f"# Whistle documentation sections ({len(sections)})", ""]
    for section in sections:
        summary = section.summary()
        lines.append(f"- `{summary['id']}`: [{summary['title']}]({summary['url']})")
    return "\n".join(lines)


def format_search_results(query: str, results: list[SearchResult]) -> str:
    """Render search results as numbered Markdown entries.

    Args:
        query: The search text, echoed in the heading.
        results: Results in cache order.

    Returns:
        Markdown text, or a short notice when nothing matched.
    """
    if not results:
        return f'No results found for "{query}".'

    entries = []
    for position, result in enumerate(results, start=1):
        fields = result.to_dict()
        entries.append(
            f"## {position}. {fields['sectionTitle']}\n\n{fields['matchedContent']}\n\n"
            f"[View full section]({fields['url']})\n\n---\n"
        )
    return f'# Whistle documentation search: "{query}"\n\nFound {len(results)} result(s):\n\n' + "\n".join(entries)


def format_feature_not_found(feature: str) -> str:
    """Render the notice for a feature with no matching section.

    Args:
        feature: Feature name as requested.

    Returns:
        Notice pointing at the search tool.
    """
    return (
        f'No documentation found for the "{feature}" feature. '
        "Try the search_whistle_docs tool for related content."
    )
