"""Documentation cache for the Whistle proxy documentation site."""

import asyncio
import logging
import time
from collections.abc import Callable

from mcp_whistle_documentation.config import DEFAULT_CACHE_TTL_S, DocsConfig
from mcp_whistle_documentation.errors import FetchError, InitializationError
from mcp_whistle_documentation.fetcher import ContentFetcher
from mcp_whistle_documentation.models import DocSection, SearchResult
from mcp_whistle_documentation.parser import SectionParser
from mcp_whistle_documentation.store import SectionStore

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def extract_excerpt(content: str, query: str) -> str:
    """Build a search excerpt around the first case-insensitive match.

    Args:
        content: Section content.
        query: Search query.

    Returns:
        Up to 100 characters either side of the match, marked with an
        ellipsis on each clamped side. When the query does not occur in the
        content, the first 200 characters followed by an ellipsis.
    """
    index = content.lower().find(query.lower())
    if index == -1:
        return content[:200] + ELLIPSIS

    start = max(0, index - 100)
    end = min(len(content), index + len(query) + 100)
    excerpt = content[start:end]
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(content):
        excerpt = excerpt + ELLIPSIS
    return excerpt


class DocumentationCache:
    """Crawls, caches and searches the Whistle documentation."""

    def __init__(
        self,
        fetcher: ContentFetcher,
        parser: SectionParser,
        store: SectionStore,
        ttl: float = DEFAULT_CACHE_TTL_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialise cache with its collaborators.

        Args:
            fetcher: Retrieves raw page markup.
            parser: Extracts section stubs and page content.
            store: On-disk section store.
            ttl: Seconds after which a successful crawl is stale.
            clock: Source of the current time in seconds.
        """
        self.fetcher = fetcher
        self.parser = parser
        self.store = store
        self.ttl = ttl
        self.clock = clock
        self.sections: dict[str, DocSection] = {}
        self.last_fetch_time = 0.0
        self.is_initialized = False

    @classmethod
    def from_config(cls, config: DocsConfig, fetcher: ContentFetcher | None = None) -> "DocumentationCache":
        """Build a cache wired from configuration.

        Args:
            config: Documentation cache configuration.
            fetcher: Optional fetcher, a fresh ContentFetcher by default.

        Returns:
            DocumentationCache instance.
        """
        parser = SectionParser(
            base_url=config.base_url,
            path_prefix=config.path_prefix,
            index_selectors=config.index_selectors,
            content_selectors=config.content_selectors,
        )
        return cls(
            fetcher=fetcher or ContentFetcher(),
            parser=parser,
            store=SectionStore(config.cache_dir),
            ttl=config.cache_ttl_s,
        )

    @property
    def is_stale(self) -> bool:
        """Whether the cache is older than its TTL."""
        return self.clock() - self.last_fetch_time >= self.ttl

    async def initialize(self) -> None:
        """Populate the cache unless it is initialised and fresh.

        Raises:
            InitializationError: If the index page cannot be fetched.
        """
        if self.is_initialized and not self.is_stale:
            return

        index_url = self.parser.base_url
        try:
            index_html = await self.fetcher.fetch(index_url)
        except FetchError as exc:
            logger.error("Error initializing Whistle docs cache: %s", exc)
            msg = f"Failed to initialize Whistle docs cache: {exc}"
            raise InitializationError(msg) from exc

        sections: dict[str, DocSection] = {}
        for stub in self.parser.parse_index(index_html):
            section = await self._load_section(stub)
            if section is None:
                continue
            if section.id in sections:
                logger.warning(
                    "Section id collision for %s: %s replaces %s", section.id, section.url, sections[section.id].url
                )
            sections[section.id] = section

        self.sections = sections
        self.last_fetch_time = self.clock()
        self.is_initialized = True
        logger.info("Initialized Whistle docs cache with %d sections", len(self.sections))

    async def _load_section(self, stub: DocSection) -> DocSection | None:
        """Fill a stub from the store, or from the network on a miss.

        Args:
            stub: Section stub from the index page.

        Returns:
            Populated section, or None if its page could not be fetched.
        """
        cached = await asyncio.to_thread(self.store.get, stub.id)
        if cached is not None:
            logger.debug("Using cached content for %s", stub.id)
            return DocSection(id=stub.id, title=stub.title, url=stub.url, content=cached.content)

        try:
            html = await self.fetcher.fetch(stub.url)
        except FetchError as exc:
            logger.warning("Error fetching section %s: %s", stub.id, exc)
            return None

        section = DocSection(id=stub.id, title=stub.title, url=stub.url, content=self.parser.extract_content(html))
        await asyncio.to_thread(self.store.put, section)
        return section

    async def get_all_sections(self) -> list[DocSection]:
        """Return every cached section, initialising first."""
        await self.initialize()
        return list(self.sections.values())

    async def get_section(self, section_id: str) -> DocSection | None:
        """Return one section by id, initialising first.

        Args:
            section_id: Section id.

        Returns:
            DocSection, or None if the last crawl produced no such id.
        """
        await self.initialize()
        return self.sections.get(section_id)

    async def search(self, query: str) -> list[SearchResult]:
        """Find sections whose title or content contains the query.

        Matching is case-insensitive substring containment. Results follow
        section order, not relevance.

        Args:
            query: Search text.

        Returns:
            Matching sections with excerpts.
        """
        await self.initialize()
        if not query:
            return []

        lower_query = query.lower()
        results = []
        for section in self.sections.values():
            if lower_query in section.title.lower() or lower_query in section.content.lower():
                results.append(
                    SearchResult(
                        section_id=section.id,
                        section_title=section.title,
                        matched_content=extract_excerpt(section.content, query),
                        url=section.url,
                    )
                )
        return results

    async def get_feature(self, name: str) -> DocSection | None:
        """Look up a feature by section id, falling back to search.

        Args:
            name: Feature name such as ``rules`` or ``plugins``.

        Returns:
            The matching section or the first search hit, else None.
        """
        feature = name.strip().lower()
        section = await self.get_section(feature)
        if section is None and feature:
            results = await self.search(feature)
            if results:
                section = self.sections.get(results[0].section_id)
        return section

    async def refresh_cache(self) -> None:
        """Discard all cached content and crawl again.

        Raises:
            InitializationError: If the index page cannot be fetched.
        """
        logger.info("Refreshing Whistle docs cache...")
        self.is_initialized = False
        self.sections.clear()
        await asyncio.to_thread(self.store.clear)
        await self.initialize()

    async def aclose(self) -> None:
        """Close the fetcher's HTTP client."""
        await self.fetcher.aclose()
