"""Auth service Pydantic v2 data models."""
from __future__ import annotations

from pydantic import BaseModel, Field


class Credential(BaseModel):
    """Identity submitted to the register endpoint.

    No constraints are applied here: scenarios deliberately send values the
    auth service must reject.
    """
    username: str
    password: str
    email: str

    def login_payload(self) -> dict[str, str]:
        """Body for the login endpoint (username and password only)."""
        return LoginRequest(username=self.username, password=self.password).model_dump()


class LoginRequest(BaseModel):
    """Credential exchange for a token pair."""
    username: str
    password: str


class TokenPair(BaseModel):
    """Tokens returned by register, login and refresh."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

    model_config = {"extra": "ignore"}


class RefreshRequest(BaseModel):
    """Body for refresh and logout."""
    refresh_token: str


class UserProfile(BaseModel):
    """Caller profile returned by ``/api/auth/me``."""
    username: str
    email: str
    is_active: bool = Field(default=True)

    model_config = {"extra": "allow"}
