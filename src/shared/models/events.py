"""Event bus envelope model."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EventEnvelope(BaseModel):
    """JSON message carried on the events topic: ``{"event": ..., "data": ...}``."""
    event: str
    data: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json()
