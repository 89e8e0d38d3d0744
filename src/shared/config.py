"""Harness configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class SharedConfig(BaseSettings):
    """Base configuration shared by every part of the harness."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class HarnessConfig(SharedConfig):
    """Endpoints and client settings for the services under test."""
    gateway_url: str = Field(
        default="http://localhost:8000", validation_alias="GATEWAY_URL"
    )
    passenger_service_url: str = Field(
        default="http://localhost:8001",
        validation_alias="PASSENGER_SERVICE_URL",
    )
    stats_service_url: str = Field(
        default="http://localhost:8002", validation_alias="STATS_SERVICE_URL"
    )
    auth_service_url: str = Field(
        default="http://localhost:8003", validation_alias="AUTH_SERVICE_URL"
    )

    http_timeout: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT")
    http_connect_timeout: float = Field(
        default=10.0, validation_alias="HTTP_CONNECT_TIMEOUT"
    )

    kafka_bootstrap_servers: str = Field(
        default="localhost:9092", validation_alias="KAFKA_BOOTSTRAP_SERVERS"
    )
    kafka_client_id: str = Field(
        default="titanic-test-client", validation_alias="KAFKA_CLIENT_ID"
    )
    kafka_topic: str = Field(
        default="titanic-events", validation_alias="KAFKA_TOPIC"
    )
    kafka_connect_retries: int = Field(
        default=10, ge=0, validation_alias="KAFKA_CONNECT_RETRIES"
    )
    kafka_retry_backoff_ms: int = Field(
        default=300, ge=0, validation_alias="KAFKA_RETRY_BACKOFF_MS"
    )

    def docs_urls(self) -> dict[str, str]:
        """Interactive documentation page of every service, by display name."""
        return {
            "Gateway": f"{self.gateway_url}/docs",
            "Auth Service": f"{self.auth_service_url}/docs",
            "Passenger Service": f"{self.passenger_service_url}/docs",
            "Statistics Service": f"{self.stats_service_url}/docs",
        }
