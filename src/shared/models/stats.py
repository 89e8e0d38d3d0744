"""Statistics service Pydantic v2 response models."""
from __future__ import annotations

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr

Number = StrictInt | StrictFloat


class StatsSummary(BaseModel):
    """Aggregate metrics from ``/api/stats``.

    Average age and top destination are null when no passenger qualifies.
    """
    total_passengers: StrictInt
    average_age: Number | None
    average_fare: Number
    most_expensive_ticket: Number
    most_popular_destination: StrictStr | None

    model_config = {"extra": "allow"}


class GroupStats(BaseModel):
    """Per-class or per-port aggregates; a group without passengers is zeroed."""
    total: StrictInt
    average_fare: Number | None = None
    average_age: Number | None = None

    model_config = {"extra": "allow"}


class DestinationCount(BaseModel):
    name: StrictStr | None
    count: StrictInt


class DestinationsResponse(BaseModel):
    destinations: list[DestinationCount]

    model_config = {"extra": "allow"}


class AgeBucket(BaseModel):
    count: StrictInt
    percentage: Number
