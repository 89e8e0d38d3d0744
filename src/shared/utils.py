"""Shared utility functions."""
from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _random_token() -> str:
    return uuid.uuid4().hex[:6]


def unique_suffix(
    clock: Callable[[], float] = time.time,
    token: Callable[[], str] = _random_token,
) -> str:
    """Return a collision-resistant suffix for identifiers in shared state.

    The millisecond timestamp keeps names sortable across runs; the random
    token separates calls made within the same millisecond.
    """
    return f"{int(clock() * 1000)}_{token()}"
