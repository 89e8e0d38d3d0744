"""Exception classes raised by the harness helpers."""
from __future__ import annotations


class HarnessError(Exception):
    """Base harness error."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class AuthBootstrapError(HarnessError):
    """Neither registration nor the fallback login produced a token."""

    def __init__(
        self, detail: str = "Registration failed", status_code: int | None = None
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class BrokerUnavailableError(HarnessError):
    """The event bus could not be reached."""

    def __init__(self, detail: str = "Kafka broker unavailable") -> None:
        super().__init__(detail=detail)


class TopicProvisioningError(HarnessError):
    """A topic could not be created or never became ready."""

    def __init__(self, detail: str = "Topic provisioning failed") -> None:
        super().__init__(detail=detail)


class MessageTimeoutError(HarnessError, TimeoutError):
    """No message arrived on a topic within the allotted time."""

    def __init__(self, topic: str, timeout_ms: int) -> None:
        self.topic = topic
        self.timeout_ms = timeout_ms
        super().__init__(
            detail=(
                f"Kafka timeout: No message received in {topic} "
                f"after {timeout_ms}ms"
            )
        )
