"""Parser for Whistle documentation HTML pages."""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from mcp_whistle_documentation.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CONTENT_SELECTORS,
    DEFAULT_INDEX_SELECTORS,
    DEFAULT_PATH_PREFIX,
)
from mcp_whistle_documentation.models import DocSection

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Elements whose text is never visible on the page.
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]


def first_non_empty(strategies: Iterable[Callable[[], T]]) -> T | None:
    """Evaluate strategies in order and return the first truthy result.

    Later strategies are not evaluated once one succeeds.

    Args:
        strategies: Zero-argument callables, in priority order.

    Returns:
        The first truthy result, or None if every strategy came up empty.
    """
    for strategy in strategies:
        result = strategy()
        if result:
            return result
    return None


def _select(soup: BeautifulSoup, selector: str) -> list[Tag]:
    try:
        return list(soup.select(selector))
    except SelectorSyntaxError as exc:
        logger.warning("Ignoring invalid selector %r: %s", selector, exc)
        return []


class SectionParser:
    """Extracts section stubs and page content from Whistle documentation HTML."""

    INDEX_TITLE = "Whistle Documentation Home"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        path_prefix: str = DEFAULT_PATH_PREFIX,
        index_selectors: Sequence[str] = DEFAULT_INDEX_SELECTORS,
        content_selectors: Sequence[str] = DEFAULT_CONTENT_SELECTORS,
    ) -> None:
        """Initialise parser.

        Args:
            base_url: Documentation site root, used to resolve relative links.
            path_prefix: Path prefix stripped from links when deriving ids.
            index_selectors: Navigation link selectors, in priority order.
            content_selectors: Content container selectors, in priority order.
        """
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.index_selectors = tuple(index_selectors)
        self.content_selectors = tuple(content_selectors)

    def parse_index(self, html: str) -> list[DocSection]:
        """Discover section stubs from the index page.

        The first selector matching any link element is used, even when all
        of its links are later skipped.

        Args:
            html: Raw markup of the documentation index page.

        Returns:
            Section stubs with empty content. Never empty: a synthetic
            ``index`` stub is returned when no links are found.
        """
        soup = BeautifulSoup(html, "html.parser")
        links = first_non_empty(self._link_strategy(soup, selector) for selector in self.index_selectors)

        sections: list[DocSection] = []
        for link in links or []:
            section = self._build_stub(link)
            if section is not None:
                sections.append(section)

        if not sections:
            logger.info("No links found with any selector, adding default index page")
            sections.append(DocSection(id="index", title=self.INDEX_TITLE, url=self.base_url))

        return sections

    def extract_content(self, html: str) -> str:
        """Extract the plain-text body of a section page.

        Args:
            html: Raw markup of a section page.

        Returns:
            Visible text of the first content container with any text, the
            whole body text as a fallback, or an empty string.
        """
        soup = BeautifulSoup(html, "html.parser")
        for element in soup(_INVISIBLE_TAGS):
            element.decompose()

        content = first_non_empty(self._content_strategy(soup, selector) for selector in self.content_selectors)
        if content:
            return content

        root = soup.body or soup
        content = self._clean_content(root.get_text())
        logger.debug("Using body content (%d chars)", len(content))
        return content

    def _link_strategy(self, soup: BeautifulSoup, selector: str) -> Callable[[], list[Tag]]:
        def strategy() -> list[Tag]:
            links = _select(soup, selector)
            logger.debug("Found %d links with selector %s", len(links), selector)
            return links

        return strategy

    def _content_strategy(self, soup: BeautifulSoup, selector: str) -> Callable[[], str]:
        def strategy() -> str:
            elements = _select(soup, selector)
            content = self._clean_content("\n".join(element.get_text() for element in elements))
            if content:
                logger.debug("Found content with selector %s (%d chars)", selector, len(content))
            return content

        return strategy

    def _build_stub(self, link: Tag) -> DocSection | None:
        """Build a section stub from a navigation link.

        Args:
            link: Anchor element.

        Returns:
            DocSection stub, or None for external, anchor or empty links.
        """
        href = link.get("href")
        if not isinstance(href, str) or not href:
            return None
        if href.startswith("http") or "#" in href:
            return None

        section_id = self._derive_id(href)
        title = self._clean_title(link.get_text()) or section_id
        logger.debug("Found link: %s -> %s", title, href)
        return DocSection(id=section_id, title=title, url=self._compute_url(href))

    def _derive_id(self, href: str) -> str:
        """Derive the section id from a relative link.

        Args:
            href: Relative link target, e.g. ``/whistle/rules.html``.

        Returns:
            Slug such as ``rules``, or ``index`` for the site root.
        """
        path = urlsplit(href).path
        path = path.removeprefix(self.path_prefix).removeprefix("./").lstrip("/")
        path = re.sub(r"\.html?$", "", path)
        return path or "index"

    def _compute_url(self, href: str) -> str:
        return urljoin(self.base_url, href)

    def _clean_content(self, content: str) -> str:
        """Tidy page text while keeping its line structure.

        Runs of spaces and tabs become one space, whitespace around line
        breaks is dropped and blank-line runs shrink to one blank line.
        Newlines are kept, so one-rule-per-line examples stay readable.

        Args:
            content: Raw text pulled from markup.

        Returns:
            Cleaned text.
        """
        content = re.sub(r"[^\S\n]+", " ", content)
        content = re.sub(r" ?\n ?", "\n", content)
        content = re.sub(r"\n{3,}", "\n\n", content)
        return content.strip()

    def _clean_title(self, title: str) -> str:
        return " ".join(title.split())
