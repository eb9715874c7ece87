"""Runtime configuration for the Whistle documentation cache."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "https://wproxy.org/whistle/"
DEFAULT_PATH_PREFIX = "/whistle/"
DEFAULT_CACHE_DIR_NAME = "whistle-docs-cache"
DEFAULT_CACHE_TTL_S = 3600.0

# Candidate navigation menus, tried in order; the first one with links wins.
DEFAULT_INDEX_SELECTORS = (
    ".sidebar-nav ul li a",
    ".sidebar ul li a",
    "nav ul li a",
    "#sidebar a",
    ".menu a",
)

# Candidate content containers, tried in order; the first one with text wins.
DEFAULT_CONTENT_SELECTORS = (
    "#main",
    ".content",
    "article",
    ".markdown-body",
    "body",
)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_selectors(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    selectors = tuple(part.strip() for part in value.split(",") if part.strip())
    return selectors or default


@dataclass(frozen=True)
class DocsConfig:
    base_url: str = DEFAULT_BASE_URL
    path_prefix: str = DEFAULT_PATH_PREFIX
    cache_dir: Path = Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIR_NAME
    cache_ttl_s: float = DEFAULT_CACHE_TTL_S
    index_selectors: tuple[str, ...] = DEFAULT_INDEX_SELECTORS
    content_selectors: tuple[str, ...] = DEFAULT_CONTENT_SELECTORS


def get_docs_config() -> DocsConfig:
    """Load documentation cache config from environment variables."""
    cache_dir = os.getenv("WHISTLE_DOCS_CACHE_DIR")
    return DocsConfig(
        base_url=os.getenv("WHISTLE_DOCS_BASE_URL", DEFAULT_BASE_URL),
        path_prefix=os.getenv("WHISTLE_DOCS_PATH_PREFIX", DEFAULT_PATH_PREFIX),
        cache_dir=(
            Path(cache_dir).expanduser()
            if cache_dir
            else Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIR_NAME
        ),
        cache_ttl_s=max(0.0, _env_float("WHISTLE_DOCS_CACHE_TTL_S", DEFAULT_CACHE_TTL_S)),
        index_selectors=_env_selectors("WHISTLE_DOCS_INDEX_SELECTORS", DEFAULT_INDEX_SELECTORS),
        content_selectors=_env_selectors("WHISTLE_DOCS_CONTENT_SELECTORS", DEFAULT_CONTENT_SELECTORS),
    )
