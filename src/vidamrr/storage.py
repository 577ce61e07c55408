from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .errors import PersistenceFailure
from .models import VideoRecord

logger = logging.getLogger(__name__)


class CatalogStore:
    """Reads and rewrites the JSON array backing the catalog."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[VideoRecord]:
        # Missing or unreadable files start an empty catalog.
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable catalog %s: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring catalog %s: top level is not an array", self.path)
            return []
        records: list[VideoRecord] = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                logger.warning("Skipping catalog entry %d: not an object", index)
                continue
            try:
                records.append(VideoRecord.from_dict(item))
            except ValueError as exc:
                logger.warning("Skipping catalog entry %d: %s", index, exc)
        return records

    def save(self, records: list[VideoRecord] | tuple[VideoRecord, ...]) -> None:
        payload = [record.to_dict() for record in records]
        text = json.dumps(payload, ensure_ascii=False, indent=2)
        temp = self.path.with_name(f"{self.path.name}.vidamrr_tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp.write_text(text, encoding="utf-8")
            os.replace(temp, self.path)
        except OSError as exc:
            logger.error("Failed to write catalog %s: %s", self.path, exc)
            try:
                temp.unlink(missing_ok=True)
            except OSError:
                pass
            raise PersistenceFailure(f"Could not save the video list ({exc}).") from exc
        logger.info("Saved %d video(s) to %s", len(payload), self.path)
