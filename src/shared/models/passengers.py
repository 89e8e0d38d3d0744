"""Passenger service Pydantic v2 data models."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr


class PassengerRecord(BaseModel):
    """Passenger as sent to the create and update endpoints.

    Values are not range-checked so boundary scenarios can submit ages and
    names the passenger service has to refuse.
    """
    name: str
    pclass: int
    sex: str
    age: int | float | None = None
    fare: int | float
    embarked: str
    destination: str
    cabin: str | None = None
    ticket: str

    def payload(self, **overrides: Any) -> dict[str, Any]:
        """Request body with optional field overrides; unset cabin is omitted."""
        data = self.model_dump(exclude_none=True)
        data.update(overrides)
        return data


class PassengerOut(BaseModel):
    """Passenger as returned by the list, fetch and search endpoints."""
    id: StrictInt
    name: StrictStr
    pclass: Literal[1, 2, 3]
    fare: StrictInt | StrictFloat
    sex: str | None = None
    age: float | None = None
    embarked: str | None = None
    destination: str | None = None
    cabin: str | None = None
    ticket: str | None = None
    created_by: Any = None

    model_config = {"extra": "allow"}
