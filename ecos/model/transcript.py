from __future__ import annotations

import datetime
import typing as t

import pydantic as p

from .base import BaseModel

# legacy message records kept their text under different column names
_ContentFields = ("question", "response", "content")
_TimestampFields = ("timestamp", "created_at", "updated_at")


class TranscriptMessage(BaseModel):
    role: str
    content: str = ""
    timestamp: str | None = None

    @p.model_validator(mode="before")
    @classmethod
    def resolve_legacy_fields(cls, data: t.Any) -> t.Any:
        if not isinstance(data, dict):
            return data
        record = t.cast(dict[str, t.Any], data)

        content = next((record[k] for k in _ContentFields if record.get(k)), "")
        timestamp = next((record[k] for k in _TimestampFields if record.get(k) is not None), None)
        if isinstance(timestamp, datetime.datetime):
            timestamp = timestamp.isoformat()

        return {
            "role": str(record.get("role") or ""),
            "content": str(content),
            "timestamp": str(timestamp) if timestamp is not None else None,
        }

    @property
    def is_student(self) -> bool:
        return self.role == "user"

    @property
    def speaker(self) -> str:
        return "Student" if self.is_student else "Patient"
