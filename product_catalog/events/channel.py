"""Event channels for product creation notifications.

A channel hands events from the service to the listener worker without
waiting for them to be consumed. Delivery is best-effort: events the
transport refuses are dropped and reported as ``EventPublishError``.

Transports:
- ``InMemoryEventChannel``: bounded asyncio queue inside the process
- ``KafkaEventChannel``: one dedicated Kafka topic through aiokafka
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Protocol

import structlog
from aiokafka import AIOKafkaConsumer, AIOKafkaProducer
from aiokafka.errors import KafkaError

from product_catalog.domain.events import ProductCreated
from product_catalog.domain.exceptions import EventPublishError
from product_catalog.infrastructure.config import Settings

logger = structlog.get_logger()


class EventPublisher(Protocol):
    """Anything the service can publish creation events to."""

    async def publish(self, event: ProductCreated) -> None: ...


class EventChannel(EventPublisher, Protocol):
    """Publisher that also feeds a consumer."""

    async def start(self) -> None: ...

    def consume(self) -> AsyncIterator[ProductCreated]: ...

    async def join(self) -> None: ...

    async def close(self) -> None: ...


# ============================================================================
# In-Memory Channel
# ============================================================================


class InMemoryEventChannel:
    """Bounded in-process queue between publisher and listener.

    Example usage:
        channel = InMemoryEventChannel(maxsize=100)
        await channel.publish(event)
        async for event in channel.consume():
            listener.handle(event)
    """

    def __init__(self, maxsize: int = 1000) -> None:
        """Initialize channel.

        Args:
            maxsize: Events held before publishes start failing.
        """
        self._queue: asyncio.Queue[ProductCreated] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    async def start(self) -> None:
        """Nothing to connect for the in-memory transport."""
        self._closed = False

    async def publish(self, event: ProductCreated) -> None:
        """Enqueue an event without waiting for the consumer.

        Args:
            event: Event to deliver.

        Raises:
            EventPublishError: If the channel is closed or full.
        """
        if self._closed:
            raise EventPublishError(event.event_type, "channel is closed")
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull as e:
            raise EventPublishError(event.event_type, "queue is full") from e

    async def consume(self) -> AsyncIterator[ProductCreated]:
        """Yield events as they arrive, forever."""
        while True:
            event = await self._queue.get()
            try:
                yield event
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued event has been consumed."""
        await self._queue.join()

    async def close(self) -> None:
        """Refuse further publishes."""
        self._closed = True


# ============================================================================
# Kafka Channel
# ============================================================================


class KafkaEventChannel:
    """Kafka-backed channel bound to a single topic.

    If the broker is unreachable at startup the channel stays degraded:
    publishes raise ``EventPublishError`` and consumption yields nothing.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        topic: str,
        client_id: str,
        group_id: str,
    ) -> None:
        self.bootstrap_servers = bootstrap_servers
        self.topic = topic
        self.client_id = client_id
        self.group_id = group_id
        self.producer: AIOKafkaProducer | None = None
        self.consumer: AIOKafkaConsumer | None = None
        self.is_connected = False

    async def start(self) -> None:
        """Connect producer and consumer."""
        producer = AIOKafkaProducer(
            bootstrap_servers=self.bootstrap_servers,
            client_id=self.client_id,
            value_serializer=lambda x: json.dumps(x).encode("utf-8"),
            key_serializer=lambda x: x.encode("utf-8") if x else None,
        )
        try:
            await producer.start()
        except KafkaError as e:
            await producer.stop()
            self._log_unavailable(e)
            return

        consumer = AIOKafkaConsumer(
            self.topic,
            bootstrap_servers=self.bootstrap_servers,
            client_id=self.client_id,
            group_id=self.group_id,
            enable_auto_commit=True,
            auto_offset_reset="latest",
        )
        try:
            await consumer.start()
        except KafkaError as e:
            await consumer.stop()
            await producer.stop()
            self._log_unavailable(e)
            return

        self.producer = producer
        self.consumer = consumer
        self.is_connected = True
        logger.info("Connected to Kafka", topic=self.topic)

    def _log_unavailable(self, error: KafkaError) -> None:
        logger.error(
            "Kafka unavailable, creation events will be dropped",
            bootstrap_servers=self.bootstrap_servers,
            topic=self.topic,
            error=str(error),
        )

    async def publish(self, event: ProductCreated) -> None:
        """Hand an event to the producer buffer.

        Does not wait for broker acknowledgement; delivery failures reported
        afterwards are only logged.

        Args:
            event: Event to deliver.

        Raises:
            EventPublishError: If not connected or the producer refuses it.
        """
        if not self.is_connected or self.producer is None:
            raise EventPublishError(event.event_type, "kafka producer not connected")
        try:
            delivery = await self.producer.send(
                self.topic,
                value=event.to_dict(),
                key=event.product_id,
            )
        except KafkaError as e:
            raise EventPublishError(event.event_type, str(e)) from e

        delivery.add_done_callback(
            lambda future: self._on_delivery(event, future)
        )

    def _on_delivery(self, event: ProductCreated, future: asyncio.Future) -> None:
        """Log a delivery that failed after publish returned."""
        if future.cancelled() or future.exception() is None:
            return
        logger.warning(
            "Creation event lost in transport",
            event_id=str(event.event_id),
            product_id=event.product_id,
            error=str(future.exception()),
        )

    async def consume(self) -> AsyncIterator[ProductCreated]:
        """Yield decoded events from the topic."""
        if not self.is_connected or self.consumer is None:
            return
        async for record in self.consumer:
            try:
                yield ProductCreated.from_dict(json.loads(record.value))
            except ValueError as e:
                logger.warning(
                    "Skipping undecodable message",
                    topic=record.topic,
                    offset=record.offset,
                    error=str(e),
                )

    async def join(self) -> None:
        """Flush records still buffered in the producer."""
        if self.producer is not None:
            await self.producer.flush()

    async def close(self) -> None:
        """Stop producer and consumer."""
        if self.producer is not None:
            await self.producer.stop()
        if self.consumer is not None:
            await self.consumer.stop()
        self.producer = None
        self.consumer = None
        self.is_connected = False


def build_event_channel(settings: Settings) -> InMemoryEventChannel | KafkaEventChannel:
    """Create the channel selected by ``settings.event_transport``."""
    if settings.event_transport == "kafka":
        return KafkaEventChannel(
            bootstrap_servers=settings.kafka_bootstrap_servers,
            topic=settings.event_queue_name,
            client_id=settings.kafka_client_id,
            group_id=settings.kafka_group_id,
        )
    return InMemoryEventChannel(maxsize=settings.event_queue_maxsize)
