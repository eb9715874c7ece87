"""JSON file store for cached Whistle documentation sections."""

import json
import logging
from pathlib import Path
from urllib.parse import quote, unquote

from mcp_whistle_documentation.errors import StoreReadError, StoreWriteError
from mcp_whistle_documentation.models import DocSection

logger = logging.getLogger(__name__)


class SectionStore:
    """Persists one JSON record per documentation section.

    Every public operation is best effort: failures are logged and reported
    through the return value rather than raised.
    """

    RECORD_SUFFIX = ".json"

    def __init__(self, cache_dir: Path) -> None:
        """Initialise store in the given directory.

        Args:
            cache_dir: Directory holding the section records. Created if absent.
        """
        self.cache_dir = cache_dir
        self._ensure_directory()

    def _ensure_directory(self) -> bool:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Could not create cache directory %s: %s", self.cache_dir, exc)
            return False
        return True

    def _record_path(self, section_id: str) -> Path:
        """Map a section id to its record file.

        Ids are percent-escaped so that separators and ``..`` segments
        cannot point outside the cache directory.

        Args:
            section_id: Section id.

        Returns:
            Path of the record file.
        """
        return self.cache_dir / f"{quote(section_id, safe='')}{self.RECORD_SUFFIX}"

    def _read_record(self, path: Path) -> DocSection:
        """Read and decode a record file.

        Args:
            path: Record file path.

        Returns:
            Decoded DocSection.

        Raises:
            StoreReadError: If the file cannot be read or is malformed.
        """
        try:
            record = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(record, dict):
                msg = f"expected a JSON object, got {type(record).__name__}"
                raise TypeError(msg)
            return DocSection.from_record(record)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StoreReadError(f"Corrupt cache record {path}: {exc}") from exc

    def _write_record(self, path: Path, section: DocSection) -> None:
        """Write a record file, replacing any previous one.

        Args:
            path: Record file path.
            section: Section to serialise.

        Raises:
            StoreWriteError: If the file cannot be written.
        """
        try:
            path.write_text(json.dumps(section.to_record(), ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise StoreWriteError(f"Could not write cache record {path}: {exc}") from exc

    def get(self, section_id: str) -> DocSection | None:
        """Retrieve a cached section.

        Args:
            section_id: Section id.

        Returns:
            DocSection, or None when missing or corrupt.
        """
        path = self._record_path(section_id)
        if not path.is_file():
            return None
        try:
            return self._read_record(path)
        except StoreReadError as exc:
            logger.warning("Error reading cache for %s: %s", section_id, exc)
            return None

    def put(self, section: DocSection) -> bool:
        """Store a section, overwriting any previous record.

        Args:
            section: Section to persist.

        Returns:
            True if the record was written.
        """
        if not self._ensure_directory():
            return False
        try:
            self._write_record(self._record_path(section.id), section)
        except StoreWriteError as exc:
            logger.warning("Error saving cache for %s: %s", section.id, exc)
            return False
        return True

    def delete(self, section_id: str) -> bool:
        """Delete a cached section.

        Args:
            section_id: Section id.

        Returns:
            True if a record was removed.
        """
        try:
            self._record_path(section_id).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Error deleting cache for %s: %s", section_id, exc)
            return False
        return True

    def _record_files(self) -> list[Path]:
        try:
            return sorted(self.cache_dir.glob(f"*{self.RECORD_SUFFIX}"))
        except OSError as exc:
            logger.warning("Error listing cache directory %s: %s", self.cache_dir, exc)
            return []

    def list_ids(self) -> list[str]:
        """Return the ids of all stored sections.

        Returns:
            Sorted list of section ids.
        """
        return sorted(unquote(path.name.removesuffix(self.RECORD_SUFFIX)) for path in self._record_files())

    def clear(self) -> int:
        """Delete every stored section.

        Failures on individual files are logged and skipped.

        Returns:
            Number of records deleted.
        """
        removed = 0
        for path in self._record_files():
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Error deleting cache file %s: %s", path, exc)
        logger.info("Cleared %d cached sections from %s", removed, self.cache_dir)
        return removed
