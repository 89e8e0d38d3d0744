"""Shared fixtures and helpers for E2E API scenarios.

Every scenario here talks to the gateway started outside the test run. When
the gateway does not answer, the whole directory is skipped.
"""
from __future__ import annotations

from typing import Generator

import httpx
import pytest

from src.harness.auth_helper import bearer, get_auth_token
from src.harness.sample_data import SYSTEM_ADMIN, make_credential
from src.shared.config import HarnessConfig

_CONFIG = HarnessConfig()

GATEWAY_URL = _CONFIG.gateway_url
AUTH_SERVICE_URL = _CONFIG.auth_service_url

# Generous timeout for real HTTP calls
TIMEOUT = httpx.Timeout(_CONFIG.http_timeout, connect=_CONFIG.http_connect_timeout)


def _gateway_reachable(base_url: str) -> bool:
    """Check whether the gateway answers on its root endpoint."""
    try:
        resp = httpx.get(f"{base_url}/", timeout=3.0)
    except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout):
        return False
    return resp.status_code == 200


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    for item in items:
        if "tests/e2e/api" in item.nodeid.replace("\\", "/"):
            item.add_marker(pytest.mark.e2e)


@pytest.fixture(scope="session")
def client() -> Generator[httpx.Client, None, None]:
    """HTTP client for the API gateway."""
    if not _gateway_reachable(GATEWAY_URL):
        pytest.skip(f"API gateway not available at {GATEWAY_URL}")
    with httpx.Client(base_url=GATEWAY_URL, timeout=TIMEOUT) as c:
        yield c


@pytest.fixture(scope="session", autouse=True)
def admin_token(client: httpx.Client) -> str:
    """Token of the system administrator.

    The auth service grants the admin role to the first identity it ever
    registers. This fixture is session-scoped and autouse so that the
    administrator is registered before any other scenario can claim the role;
    on later runs it simply logs in.
    """
    return get_auth_token(client, SYSTEM_ADMIN)


@pytest.fixture(scope="module")
def user_token(client: httpx.Client) -> str:
    """Token of a fresh, non-admin identity."""
    return get_auth_token(client, make_credential("user"))


@pytest.fixture
def passenger_cleanup(
    client: httpx.Client, admin_token: str
) -> Generator[list[int], None, None]:
    """Passenger ids appended here are deleted with the admin token afterwards."""
    created: list[int] = []
    yield created
    for passenger_id in created:
        client.delete(f"/api/passengers/{passenger_id}", headers=bearer(admin_token))
