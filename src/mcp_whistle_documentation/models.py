"""Data models for Whistle documentation."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class DocSection:
    """Represents a documentation page."""

    id: str
    title: str
    url: str
    content: str = ""

    def to_record(self) -> dict[str, str]:
        """Serialise the section for the on-disk store.

        Returns:
            Mapping with id, title, content and url keys.
        """
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "DocSection":
        """Build a section from a stored record.

        Args:
            record: Mapping read from a JSON record.

        Returns:
            DocSection instance.

        Raises:
            KeyError: If a required field is missing.
            TypeError: If a field is not a string.
        """
        fields = {name: record[name] for name in ("id", "title", "content", "url")}
        for name, value in fields.items():
            if not isinstance(value, str):
                msg = f"Field {name!r} must be a string, got {type(value).__name__}"
                raise TypeError(msg)
        return cls(**fields)

    def summary(self) -> dict[str, str]:
        """Listing projection of the section."""
        return {"id": self.id, "title": self.title, "url": self.url}

    def detail(self) -> dict[str, str]:
        """Single-section projection of the section."""
        return {"title": self.title, "content": self.content, "url": self.url}


@dataclass
class SearchResult:
    """Represents a search result."""

    section_id: str
    section_title: str
    matched_content: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {
            "sectionId": self.section_id,
            "sectionTitle": self.section_title,
            "matchedContent": self.matched_content,
            "url": self.url,
        }
