from __future__ import annotations

import json
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence

_BASE36 = string.digits + string.ascii_lowercase
_RECORD_FIELDS = ("id", "url", "title", "thumbnail", "createdAt")


@dataclass(frozen=True)
class VideoRecord:
    id: str
    url: str
    title: str
    thumbnail: str
    created_at: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoRecord:
        values = {}
        for key in _RECORD_FIELDS:
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"Video record field {key!r} must be a string")
            values[key] = value
        return cls(
            id=values["id"],
            url=values["url"],
            title=values["title"],
            thumbnail=values["thumbnail"],
            created_at=values["createdAt"],
        )


@dataclass(frozen=True)
class ComponentRow:
    key: str
    label: str
    value: str


def component_rows_for(record: VideoRecord) -> list[ComponentRow]:
    return [
        ComponentRow("title", "Title", record.title),
        ComponentRow("thumbnail", "Thumbnail", record.thumbnail),
        ComponentRow("url", "URL", record.url),
        ComponentRow("json", "JSON", json.dumps(record.to_dict(), ensure_ascii=False, indent=2)),
    ]


class Catalog:
    """Ordered, url-unique sequence of video records."""

    def __init__(self, records: Iterable[VideoRecord] = ()) -> None:
        self._records: list[VideoRecord] = []
        self._urls: set[str] = set()
        for record in records:
            if record.url in self._urls:
                continue
            self.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def all(self) -> Sequence[VideoRecord]:
        return tuple(self._records)

    def get(self, index: int) -> VideoRecord | None:
        if 0 <= index < len(self._records):
            return self._records[index]
        return None

    def contains(self, url: str) -> bool:
        return url in self._urls

    def append(self, record: VideoRecord) -> int:
        if record.url in self._urls:
            raise ValueError(f"Duplicate video url: {record.url}")
        self._records.append(record)
        self._urls.add(record.url)
        return len(self._records) - 1

    def pop_last(self) -> VideoRecord:
        record = self._records.pop()
        self._urls.discard(record.url)
        return record

    def ids(self) -> set[str]:
        return {record.id for record in self._records}

    def component_rows_for(self, record: VideoRecord) -> list[ComponentRow]:
        return component_rows_for(record)


def new_record(
    url: str,
    title: str,
    thumbnail: str,
    *,
    taken_ids: set[str] | None = None,
    now: datetime | None = None,
) -> VideoRecord:
    now = now or datetime.now(timezone.utc)
    return VideoRecord(
        id=new_record_id(taken_ids or set(), millis=int(now.timestamp() * 1000)),
        url=url,
        title=title,
        thumbnail=thumbnail,
        created_at=_format_timestamp(now),
    )


def new_record_id(taken: set[str], millis: int | None = None) -> str:
    value = millis if millis is not None else int(time.time() * 1000)
    candidate = _to_base36(value)
    while candidate in taken:
        value += 1
        candidate = _to_base36(value)
    return candidate


def _to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _format_timestamp(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
