"""
Meeting store backed by a single JSON file.

The file holds one record per meeting, keyed by code, in the same layout the
API returns (``id``, ``name``, ``creatorName``, ``timeSlots``,
``participants``, ``votes``, ``createdAt``).
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import StorageError
from ..domain.models import Meeting

logger = logging.getLogger(__name__)


class JsonFileMeetingStore:
    """
    Reads the file on every call and keeps nothing cached between calls.

    ``put`` re-reads the file, replaces the one record it was given and
    writes the result back, so stores opened on the same path by separate
    processes keep each other's meetings. Writes go to a temporary file in
    the same directory which then replaces the original, so a crash
    mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Location of the JSON file (created on first write)

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        self.path = Path(path)
        self._lock = threading.Lock()
        self._load()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        """Load all meeting records from disk."""
        if not self.path.exists():
            logger.debug("No meeting file at %s, starting empty", self.path)
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read meetings from {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Meeting file {self.path} must contain a JSON object")

        logger.debug("Loaded %d meetings from %s", len(data), self.path)
        return data

    def _save(self, records: Dict[str, Dict[str, Any]]) -> None:
        """Write all meeting records to disk atomically."""
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".meetsync-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error("Could not write meetings to %s: %s", self.path, e)
            raise StorageError(f"Could not write meetings to {self.path}: {e}") from e

        logger.debug("Saved %d meetings to %s", len(records), self.path)

    def get(self, code: str) -> Meeting | None:
        with self._lock:
            record = self._load().get(code)
        if record is None:
            return None

        try:
            return Meeting.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Corrupt meeting record {code!r} in {self.path}: {e}") from e

    def put(self, code: str, meeting: Meeting) -> None:
        with self._lock:
            records = self._load()
            records[code] = meeting.to_dict()
            self._save(records)

    def list_codes(self) -> List[str]:
        with self._lock:
            return list(self._load())
