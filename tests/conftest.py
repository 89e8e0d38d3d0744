"""Shared test fixtures for the titanic-e2e test suite."""
from __future__ import annotations

from typing import Generator

import pytest

from src.shared.config import HarnessConfig
from src.shared.logging import setup_logging, trace_id_var


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-manual",
        action="store_true",
        default=False,
        help="run scenarios marked 'manual' (e.g. the resilience loop)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--run-manual"):
        return
    skip_manual = pytest.mark.skip(reason="manual scenario; pass --run-manual to run")
    for item in items:
        if "manual" in item.keywords:
            item.add_marker(skip_manual)


@pytest.fixture(scope="session")
def harness_config() -> HarnessConfig:
    """Configuration resolved once from the environment."""
    return HarnessConfig()


@pytest.fixture(scope="session", autouse=True)
def harness_logging(harness_config: HarnessConfig) -> None:
    """JSON logs for every helper below the ``src`` namespace."""
    setup_logging("src", harness_config.log_level)


@pytest.fixture(autouse=True)
def scenario_trace_id(request: pytest.FixtureRequest) -> Generator[str, None, None]:
    """Bind the test node id as trace_id for log lines emitted during a test."""
    token = trace_id_var.set(request.node.nodeid)
    yield request.node.nodeid
    trace_id_var.reset(token)
