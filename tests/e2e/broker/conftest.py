"""Fixtures for scenarios against the Kafka broker.

The broker is an optional dependency: when it cannot be reached the
scenarios are skipped instead of failed.
"""
from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from src.harness.kafka_helper import KafkaHelper, disconnect_with_timeout
from src.shared.config import HarnessConfig
from src.shared.errors import HarnessError


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    for item in items:
        if "tests/e2e/broker" in item.nodeid.replace("\\", "/"):
            item.add_marker(pytest.mark.broker)


@pytest_asyncio.fixture
async def kafka(harness_config: HarnessConfig) -> AsyncGenerator[KafkaHelper, None]:
    """Connected helper with the events topic provisioned."""
    helper = KafkaHelper.from_config(harness_config)
    try:
        await helper.connect()
        await helper.ensure_topic_exists(harness_config.kafka_topic)
    except HarnessError as exc:
        await disconnect_with_timeout(helper)
        pytest.skip(f"Kafka broker not available: {exc}")

    yield helper

    await disconnect_with_timeout(helper, timeout=5.0)
