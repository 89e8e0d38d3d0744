"""Manual resilience probe against the statistics endpoint.

Run the loop and stop a backing container (e.g. ``docker stop
passenger-service``) while it runs; the log shows how the gateway degrades.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import httpx

logger = logging.getLogger(__name__)

STATS_PATH = "/api/stats"


class ProbeOutcome(str, Enum):
    """How a single response is judged."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"
    UNEXPECTED = "unexpected"
    UNREACHABLE = "unreachable"


@dataclass
class ProbeResult:
    attempt: int
    status_code: int | None
    duration_ms: float
    outcome: ProbeOutcome


def classify_status(status_code: int | None) -> ProbeOutcome:
    """200 is healthy; 502/503 are a gracefully handled outage; 500 is not."""
    if status_code is None:
        return ProbeOutcome.UNREACHABLE
    if status_code == 200:
        return ProbeOutcome.HEALTHY
    if status_code in (502, 503):
        return ProbeOutcome.DEGRADED
    if status_code == 500:
        return ProbeOutcome.CRITICAL
    return ProbeOutcome.UNEXPECTED


def run_resilience_loop(
    client: httpx.Client,
    iterations: int = 20,
    interval_s: float = 2.0,
    path: str = STATS_PATH,
    sleep: Callable[[float], None] = time.sleep,
) -> list[ProbeResult]:
    """Probe *path* *iterations* times, *interval_s* apart.

    Transport errors are recorded as ``UNREACHABLE`` rather than raised so a
    stopped gateway does not end the observation early.
    """
    results: list[ProbeResult] = []
    logger.info("Starting resilience loop: %d probes against %s", iterations, path)

    for attempt in range(1, iterations + 1):
        start = time.monotonic()
        status_code: int | None
        try:
            status_code = client.get(path).status_code
        except httpx.HTTPError as exc:
            logger.warning("Req #%d: transport error %s", attempt, exc)
            status_code = None
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        outcome = classify_status(status_code)
        results.append(ProbeResult(attempt, status_code, duration_ms, outcome))

        if outcome is ProbeOutcome.CRITICAL:
            logger.error(
                "Req #%d: Status %s (%sms) - unhandled server error",
                attempt, status_code, duration_ms,
            )
        else:
            logger.info(
                "Req #%d: Status %s (%sms) - %s",
                attempt, status_code, duration_ms, outcome.value,
            )

        if attempt < iterations:
            sleep(interval_s)

    return results
