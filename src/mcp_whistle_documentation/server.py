"""Whistle documentation MCP server."""

import argparse
import asyncio
import logging
import sys
from typing import Any
from urllib.parse import quote

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError
from fastmcp.resources import FunctionResource

from mcp_whistle_documentation.cache import DocumentationCache
from mcp_whistle_documentation.config import get_docs_config
from mcp_whistle_documentation.errors import InitializationError
from mcp_whistle_documentation.formatting import (
    format_feature_not_found,
    format_search_results,
    format_section,
    format_section_list,
)
from mcp_whistle_documentation.models import DocSection

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Whistle documentation is currently unavailable"
RESOURCE_URI_PREFIX = "whistle://docs/"

mcp = FastMCP(
    "whistle-docs",
    instructions=(
        "Whistle proxy documentation server. "
        "Lists documentation sections as resources and provides tools to search "
        "the documentation, look up a feature and refresh the local cache."
    ),
)

_cache: DocumentationCache | None = None
_registered_sections: set[str] = set()


def get_cache() -> DocumentationCache:
    """Return the server's documentation cache, building it on first use.

    Returns:
        The cache configured from the environment.
    """
    global _cache
    if _cache is None:
        _cache = DocumentationCache.from_config(get_docs_config())
    return _cache


def section_uri(section_id: str) -> str:
    """Build the resource URI of a section."""
    return RESOURCE_URI_PREFIX + quote(section_id, safe="/")


def _section_resource(section: DocSection) -> FunctionResource:
    section_id = section.id

    async def read() -> str:
        return await read_section_text(get_cache(), section_id)

    return FunctionResource.from_function(
        fn=read,
        uri=section_uri(section_id),
        name=section.title,
        description=f"Whistle documentation: {section.title}",
        mime_type="text/markdown",
    )


def register_section_resources(docs: DocumentationCache) -> int:
    """Add a concrete resource for every cached section not yet listed.

    Args:
        docs: Cache whose sections are published.

    Returns:
        Number of resources added.
    """
    added = 0
    for section in docs.sections.values():
        if section.id in _registered_sections:
            continue
        mcp.add_resource(_section_resource(section))
        _registered_sections.add(section.id)
        added += 1
    if added:
        logger.info("Registered %d section resources", added)
    return added


async def list_sections_text(docs: DocumentationCache) -> str:
    """Render the section listing.

    Args:
        docs: Cache to read.

    Returns:
        Markdown listing of every section.

    Raises:
        ToolError: If the docs are unavailable.
    """
    try:
        sections = await docs.get_all_sections()
    except InitializationError as exc:
        raise ToolError(UNAVAILABLE_MESSAGE) from exc
    register_section_resources(docs)
    return format_section_list(sections)

async def read_section_text(docs: DocumentationCache, section_id: str) -> str:
    """Render one section for a resource read.

    Raises:
        ResourceError: If the section does not exist or the docs are unavailable.
    """
    try:
        section = await docs.get_section(section_id)
    except InitializationError as exc:
        raise ResourceError(UNAVAILABLE_MESSAGE) from exc
    if section is None:
        raise ResourceError(f"Whistle documentation section '{section_id}' not found")
    return format_section(section)


async def search_docs_text(docs: DocumentationCache, query: str) -> str:
    """Run a search and render the results.

    Raises:
        ToolError: If the query is empty or the docs are unavailable.
    """
    query = query.strip()
    if not query:
        raise ToolError("Search query is required")
    try:
        results = await docs.search(query)
    except InitializationError as exc:
        raise ToolError(UNAVAILABLE_MESSAGE) from exc
    return format_search_results(query, results)


async def feature_text(docs: DocumentationCache, feature: str) -> str:
    """Render the section describing a feature.

    Raises:
        ToolError: If the feature name is empty or the docs are unavailable.
    """
    if not feature.strip():
        raise ToolError("Feature name is required")
    try:
        section = await docs.get_feature(feature)
    except InitializationError as exc:
        raise ToolError(UNAVAILABLE_MESSAGE) from exc
    if section is None:
        return format_feature_not_found(feature)
    return format_section(section)


async def refresh_text(docs: DocumentationCache) -> str:
    """Rebuild the cache and publish any new section resources.

    Args:
        docs: Cache to refresh.

    Returns:
        Confirmation with the new section count.

    Raises:
        ToolError: If the docs are unavailable.
    """
    try:
        await docs.refresh_cache()
    except InitializationError as exc:
        raise ToolError(UNAVAILABLE_MESSAGE) from exc
    register_section_resources(docs)
    return f"Whistle documentation cache refreshed ({len(docs.sections)} sections)."


@mcp.resource("whistle://docs", mime_type="text/markdown")
async def sections_resource() -> str:
    """List all Whistle documentation sections."""
    try:
        return await list_sections_text(get_cache())
    except ToolError as exc:
        raise ResourceError(str(exc)) from exc


@mcp.resource("whistle://docs/{section_id}", mime_type="text/markdown")
async def section_resource(section_id: str) -> str:
    """Read one Whistle documentation section."""
    return await read_section_text(get_cache(), section_id)


@mcp.tool()
async def list_whistle_sections() -> str:
    """List the ids, titles and URLs of all Whistle documentation sections."""
    return await list_sections_text(get_cache())


@mcp.tool()
async def search_whistle_docs(query: str) -> str:
    """Search the Whistle documentation for a keyword (case-insensitive)."""
    return await search_docs_text(get_cache(), query)


@mcp.tool()
async def get_whistle_feature(feature: str) -> str:
    """Get the documentation of a Whistle feature, e.g. rules, plugins or webui."""
    return await feature_text(get_cache(), feature)


@mcp.tool()
async def refresh_whistle_docs() -> str:
    """Discard the Whistle documentation cache and fetch it again."""
    return await refresh_text(get_cache())


async def _warm_up() -> None:
    docs = get_cache()
    try:
        await docs.initialize()
        register_section_resources(docs)
    except InitializationError as exc:
        logger.warning("Starting without cached documentation: %s", exc)
    finally:
        # The HTTP client is bound to this event loop; the server runs its own.
        await docs.aclose()


def main() -> None:
    """Entry point for the Whistle documentation MCP server."""
    parser = argparse.ArgumentParser(
        prog="mcp-whistle-documentation",
        description="Whistle proxy documentation exposed over MCP",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host for http/sse transport (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for http/sse transport (default: 8000)")
    parser.add_argument("--no-warm-up", action="store_true", help="Skip crawling the docs before serving")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args()

    # stdout carries the stdio transport
    logging.basicConfig(
        level=args.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.no_warm_up:
        logger.info("Initializing Whistle docs cache...")
        asyncio.run(_warm_up())

    run_kwargs: dict[str, Any] = {"transport": args.transport, "show_banner": False}
    if args.transport in ("http", "sse"):
        run_kwargs["host"] = args.host
        run_kwargs["port"] = args.port

    try:
        mcp.run(**run_kwargs)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
