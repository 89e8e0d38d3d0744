"""Kafka client lifecycle for event-bus scenarios.

``KafkaHelper`` owns one producer, one consumer and one admin client against
the broker. Scenarios use it to provision a topic, publish a JSON envelope and
read it back without going through the services that normally talk to the
bus.

Typical use from an async fixture::

    helper = KafkaHelper.from_config(HarnessConfig())
    try:
        await helper.connect()
        await helper.ensure_topic_exists("titanic-events")
    except HarnessError as exc:
        await disconnect_with_timeout(helper)
        pytest.skip(str(exc))
    yield helper
    await disconnect_with_timeout(helper)

The consumer always reads from the earliest offset with a consumer group that
is unique to the helper, so a message published before the subscription has
settled is still delivered.
"""
from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from aiokafka import AIOKafkaConsumer, AIOKafkaProducer
from aiokafka.admin import AIOKafkaAdminClient, NewTopic
from aiokafka.errors import KafkaError, TopicAlreadyExistsError

from src.shared.config import HarnessConfig
from src.shared.constants import TOPIC_PARTITIONS, TOPIC_REPLICATION_FACTOR
from src.shared.errors import (
    BrokerUnavailableError,
    MessageTimeoutError,
    TopicProvisioningError,
)
from src.shared.models.events import EventEnvelope
from src.shared.utils import unique_suffix

logger = logging.getLogger(__name__)

# Kafka protocol error code for CreateTopics on an existing topic
KAFKA_ERROR_TOPIC_ALREADY_EXISTS = 36

# Upper bound for a single backoff sleep between connection attempts
MAX_RETRY_BACKOFF_S = 5.0

_Client = TypeVar("_Client", AIOKafkaProducer, AIOKafkaConsumer, AIOKafkaAdminClient)


class KafkaHelper:
    """Producer, consumer and admin sessions for one test module."""

    def __init__(
        self,
        bootstrap_servers: str = "localhost:9092",
        client_id: str = "titanic-test-client",
        group_id: str | None = None,
        connect_retries: int = 10,
        retry_backoff_ms: int = 300,
    ) -> None:
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.group_id = group_id or f"test-group-{unique_suffix()}"
        self.connect_retries = connect_retries
        self.retry_backoff_ms = retry_backoff_ms

        self._producer: AIOKafkaProducer | None = None
        self._consumer: AIOKafkaConsumer | None = None
        self._admin: AIOKafkaAdminClient | None = None

    @classmethod
    def from_config(cls, config: HarnessConfig) -> KafkaHelper:
        return cls(
            bootstrap_servers=config.kafka_bootstrap_servers,
            client_id=config.kafka_client_id,
            connect_retries=config.kafka_connect_retries,
            retry_backoff_ms=config.kafka_retry_backoff_ms,
        )

    @property
    def connected(self) -> bool:
        return None not in (self._producer, self._consumer, self._admin)

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Start producer, consumer and admin sessions.

        Raises:
            BrokerUnavailableError: If any session cannot be started within
                the configured number of attempts.
        """
        self._producer = await self._start_with_retry(
            "producer",
            lambda: AIOKafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
            ),
            lambda client: client.start(),
            lambda client: client.stop(),
        )
        self._consumer = await self._start_with_retry(
            "consumer",
            lambda: AIOKafkaConsumer(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
                group_id=self.group_id,
                auto_offset_reset="earliest",
            ),
            lambda client: client.start(),
            lambda client: client.stop(),
        )
        self._admin = await self._start_with_retry(
            "admin",
            lambda: AIOKafkaAdminClient(
                bootstrap_servers=self.bootstrap_servers,
                client_id=self.client_id,
            ),
            lambda client: client.start(),
            lambda client: client.close(),
        )
        logger.info("Connected to Kafka broker at %s", self.bootstrap_servers)

    async def disconnect(self) -> None:
        """Stop producer, consumer and admin sessions that were started.

        Every session is stopped even if an earlier one fails; the first
        failure is re-raised once all of them have been released.
        """
        producer, consumer, admin = self._producer, self._consumer, self._admin
        self._producer = self._consumer = self._admin = None

        first_error: BaseException | None = None
        for name, stop in (
            ("producer", producer.stop if producer is not None else None),
            ("consumer", consumer.stop if consumer is not None else None),
            ("admin", admin.close if admin is not None else None),
        ):
            if stop is None:
                continue
            try:
                await stop()
            except (KafkaError, OSError) as exc:
                logger.warning("Error stopping Kafka %s: %s", name, exc)
                if first_error is None:
                    first_error = exc

        if first_error is not None:
            raise first_error
        logger.info("Disconnected from Kafka broker at %s", self.bootstrap_servers)

    async def _start_with_retry(
        self,
        name: str,
        factory: Callable[[], _Client],
        start: Callable[[_Client], Awaitable[Any]],
        stop: Callable[[_Client], Awaitable[Any]],
    ) -> _Client:
        """Start a fresh client per attempt with exponential backoff."""
        backoff = self.retry_backoff_ms / 1000
        attempts = self.connect_retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            client = factory()
            try:
                await start(client)
                return client
            except (KafkaError, OSError) as exc:
                last_error = exc
                logger.warning(
                    "Kafka %s connection attempt %d/%d failed: %s",
                    name,
                    attempt,
                    attempts,
                    exc,
                )
                try:
                    await stop(client)
                except (KafkaError, OSError) as stop_exc:
                    logger.debug("Ignoring error stopping %s: %s", name, stop_exc)
            if attempt < attempts:
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2, MAX_RETRY_BACKOFF_S)

        raise BrokerUnavailableError(
            f"Failed to connect Kafka {name} to {self.bootstrap_servers} "
            f"after {attempts} attempts: {last_error}"
        )

    # ── Topics ───────────────────────────────────────────────────────────

    async def ensure_topic_exists(self, topic: str, ready_timeout: float = 10.0) -> None:
        """Create *topic* if it is missing and wait until its leaders are elected.

        Raises:
            TopicProvisioningError: If the broker rejects the topic or the
                partitions have no leader after *ready_timeout* seconds.
        """
        admin = self._require(self._admin, "admin")
        topics = await admin.list_topics()
        if topic in topics:
            return

        logger.info("Creating topic '%s'...", topic)
        try:
            response = await admin.create_topics(
                [
                    NewTopic(
                        name=topic,
                        num_partitions=TOPIC_PARTITIONS,
                        replication_factor=TOPIC_REPLICATION_FACTOR,
                    )
                ]
            )
        except TopicAlreadyExistsError:
            logger.debug("Topic '%s' was created concurrently", topic)
        else:
            for topic_error in getattr(response, "topic_errors", None) or []:
                error_code = topic_error[1]
                if error_code in (0, KAFKA_ERROR_TOPIC_ALREADY_EXISTS):
                    continue
                message = topic_error[2] if len(topic_error) > 2 else ""
                raise TopicProvisioningError(
                    f"Failed to create topic '{topic}': "
                    f"error_code={error_code} {message}".rstrip()
                )

        await self._wait_for_leaders(topic, ready_timeout)
        logger.info("Topic '%s' created and ready.", topic)

    async def _wait_for_leaders(
        self, topic: str, timeout: float, interval: float = 0.5
    ) -> None:
        admin = self._require(self._admin, "admin")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while loop.time() < deadline:
            try:
                description = await admin.describe_topics([topic])
            except KafkaError as exc:
                logger.debug("Topic %s metadata check failed: %s", topic, exc)
            else:
                if _partitions_have_leaders(description, topic):
                    return
            await asyncio.sleep(interval)

        raise TopicProvisioningError(
            f"Topic '{topic}' has no elected leader after {timeout}s"
        )

    # ── Messages ─────────────────────────────────────────────────────────

    async def send_message(
        self, topic: str, message: EventEnvelope | Mapping[str, Any]
    ) -> None:
        """Publish *message* as JSON text and wait for the broker ack."""
        producer = self._require(self._producer, "producer")
        if isinstance(message, EventEnvelope):
            body = message.to_json()
        else:
            body = json.dumps(message)
        await producer.send_and_wait(topic, body.encode("utf-8"))
        logger.info("Sent to %s: %s", topic, body)

    async def consume_one_message(self, topic: str, timeout: float = 10.0) -> Any:
        """Return the first decoded message on *topic*.

        The subscription starts from the earliest offset and is dropped again
        once a message arrives or the wait times out, so no fetch loop
        outlives the call.

        Raises:
            MessageTimeoutError: If nothing arrives within *timeout* seconds.
        """
        consumer = self._require(self._consumer, "consumer")
        consumer.subscribe(topics=[topic])
        try:
            payload = await asyncio.wait_for(self._next_payload(consumer), timeout)
        except asyncio.TimeoutError:
            raise MessageTimeoutError(topic, int(timeout * 1000)) from None
        finally:
            self._halt_subscription(consumer, topic)

        logger.info("Received from %s: %s", topic, payload)
        return payload

    async def collect_messages(
        self, topic: str, count: int, timeout: float = 10.0
    ) -> list[Any]:
        """Return the first *count* decoded messages on *topic*.

        Buffered counterpart of :meth:`consume_one_message` for scenarios that
        expect several events.

        Raises:
            MessageTimeoutError: If fewer than *count* messages arrive within
                *timeout* seconds.
        """
        consumer = self._require(self._consumer, "consumer")
        received: list[Any] = []

        async def _fill() -> None:
            while len(received) < count:
                received.append(await self._next_payload(consumer))

        consumer.subscribe(topics=[topic])
        try:
            await asyncio.wait_for(_fill(), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Collected %d/%d messages from %s before timeout",
                len(received),
                count,
                topic,
            )
            raise MessageTimeoutError(topic, int(timeout * 1000)) from None
        finally:
            self._halt_subscription(consumer, topic)

        return received

    @staticmethod
    async def _next_payload(consumer: AIOKafkaConsumer) -> Any:
        while True:
            record = await consumer.getone()
            if record.value:
                return json.loads(record.value.decode("utf-8"))

    @staticmethod
    def _halt_subscription(consumer: AIOKafkaConsumer, topic: str) -> None:
        # Failures here are expected while the fetcher is winding down.
        try:
            consumer.unsubscribe()
        except Exception as exc:
            logger.debug("Ignoring error while halting consumer on %s: %s", topic, exc)

    @staticmethod
    def _require(client: _Client | None, name: str) -> _Client:
        if client is None:
            raise BrokerUnavailableError(f"Kafka {name} is not connected; call connect() first")
        return client


def _partitions_have_leaders(description: Any, topic: str) -> bool:
    """Whether a ``describe_topics`` result shows *topic* with leaders elected.

    Accepts both the list-of-dicts and the dict-keyed-by-topic response shapes.
    """
    if isinstance(description, Mapping):
        info = description.get(topic)
    else:
        info = next(
            (entry for entry in description or [] if _field(entry, "topic") == topic),
            None,
        )
    if info is None or _field(info, "error_code", 0) not in (0, None):
        return False

    partitions = _field(info, "partitions", []) or []
    if len(partitions) < TOPIC_PARTITIONS:
        return False
    return all(_field(p, "leader", -1) >= 0 for p in partitions)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


async def disconnect_with_timeout(helper: KafkaHelper, timeout: float = 5.0) -> bool:
    """Disconnect *helper* but give up after *timeout* seconds.

    A degraded broker can leave ``disconnect`` hanging; teardown proceeds
    anyway and the outcome is only logged.

    Returns:
        True if the helper disconnected cleanly.
    """
    try:
        await asyncio.wait_for(helper.disconnect(), timeout)
    except asyncio.TimeoutError:
        logger.warning("Kafka disconnect timed out after %.1fs - continuing", timeout)
        return False
    except (KafkaError, OSError) as exc:
        logger.warning("Error disconnecting from Kafka (ignoring): %s", exc)
        return False
    return True
