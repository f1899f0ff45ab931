# src/storage/grouping_store.py - v1
"""Persist the grouping snapshot that query sessions read.

Each successful batch run replaces the snapshot wholesale; nothing is merged
with a previous run. The file is the full GroupingResult, document content
included, with no version field.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from leaseorganizer.core.models import GroupingResult

logger = logging.getLogger(__name__)

DEFAULT_GROUPING_FILE = Path(".document-grouping.json")


class GroupingStore:
    """JSON file holding the latest GroupingResult."""

    def __init__(self, path: str | Path = DEFAULT_GROUPING_FILE) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, result: GroupingResult) -> bool:
        """Overwrite the snapshot with this result.

        Returns:
            False if the file could not be written (logged, not raised).
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(result.to_json_dict(), indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Failed to save grouping result %s: %s", self._path, e)
            return False
        logger.info(
            "Saved grouping snapshot to %s (%d documents)",
            self._path, result.stats.total_documents,
        )
        return True

    def load(self) -> GroupingResult | None:
        """Read the snapshot, or None if it is missing or unreadable."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return GroupingResult.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to load grouping result %s: %s", self._path, e)
            return None
