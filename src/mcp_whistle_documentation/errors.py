"""Exception hierarchy for the Whistle documentation cache."""


class WhistleDocsError(Exception):
    """Base class for documentation cache errors."""


class FetchError(WhistleDocsError):
    """Raised when a URL cannot be retrieved."""

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        self.url = url
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to fetch {url}{detail}")


class InitializationError(WhistleDocsError):
    """Raised when the documentation index page cannot be fetched."""


class StoreReadError(WhistleDocsError):
    """Raised when a stored section record cannot be read or decoded."""


class StoreWriteError(WhistleDocsError):
    """Raised when a section record cannot be written."""
