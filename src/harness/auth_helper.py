"""Register-or-login bootstrap for bearer tokens."""
from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from src.shared.errors import AuthBootstrapError
from src.shared.models.auth import Credential, TokenPair

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/auth/register"
LOGIN_PATH = "/api/auth/login"


def _as_credential(credentials: Credential | Mapping[str, str]) -> Credential:
    if isinstance(credentials, Credential):
        return credentials
    return Credential.model_validate(dict(credentials))


def get_token_pair(
    client: httpx.Client, credentials: Credential | Mapping[str, str]
) -> TokenPair:
    """Return a token pair for *credentials*, registering the identity if new.

    Registration is attempted first. A 400 means the username is taken, in
    which case the identity logs in with username and password instead. The
    flow is not retried: a rejected login after a conflict usually means the
    stored password differs from *credentials*.

    Args:
        client: HTTP client whose ``base_url`` is the gateway.
        credentials: Username, password and e-mail of the identity.

    Returns:
        Tokens from the registration or the login response.

    Raises:
        AuthBootstrapError: If registration fails for any reason other than a
            conflict, or if the fallback login is rejected.
    """
    credential = _as_credential(credentials)

    reg_resp = client.post(REGISTER_PATH, json=credential.model_dump())

    if reg_resp.status_code == 400:
        logger.info(
            "User %s already exists, falling back to login", credential.username
        )
        login_resp = client.post(LOGIN_PATH, json=credential.login_payload())
        if not login_resp.is_success:
            raise AuthBootstrapError(
                f"Login failed during auth helper for '{credential.username}': "
                f"{login_resp.text}",
                status_code=login_resp.status_code,
            )
        return TokenPair.model_validate(login_resp.json())

    if not reg_resp.is_success:
        raise AuthBootstrapError(
            f"Registration failed for '{credential.username}': {reg_resp.text}",
            status_code=reg_resp.status_code,
        )

    logger.info("Registered user %s", credential.username)
    return TokenPair.model_validate(reg_resp.json())


def get_auth_token(
    client: httpx.Client, credentials: Credential | Mapping[str, str]
) -> str:
    """Access token for *credentials*; see :func:`get_token_pair`."""
    return get_token_pair(client, credentials).access_token


def bearer(token: str) -> dict[str, str]:
    """Authorization header for *token*."""
    return {"Authorization": f"Bearer {token}"}
