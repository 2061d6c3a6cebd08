"""Tests for the product creation listener and its worker."""

import asyncio
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from product_catalog.catalog.schemas import ProductRequest
from product_catalog.catalog.service import ProductService
from product_catalog.domain.events import ProductCreated
from product_catalog.events.channel import InMemoryEventChannel
from product_catalog.events.listener import ListenerWorker, ProductCreatedListener
from product_catalog.infrastructure.database import TransactionManager

RECEIVED_AT = datetime(2026, 10, 19, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def log() -> MagicMock:
    """Logger handed to the listener."""
    return MagicMock()


@pytest.fixture
def listener(log: MagicMock) -> ProductCreatedListener:
    """Listener with a fixed clock."""
    return ProductCreatedListener(log, clock=lambda: RECEIVED_AT)


class TestProductCreatedListener:
    """Tests for ProductCreatedListener.handle."""

    def test_logs_structured_record(
        self, listener: ProductCreatedListener, log: MagicMock
    ) -> None:
        """Should log name, status, product id, payload and receipt time."""
        event = ProductCreated(
            product_id=str(uuid.uuid4()),
            name="Mouse",
            price=Decimal("19.90"),
            category="Peripherals",
        )

        record = listener.handle(event)

        assert record == {
            "event_name": "product.created",
            "status": "success",
            "product_id": event.product_id,
            "payload": event.payload(),
            "received_at": "2026-10-19T12:30:00+00:00",
        }
        log.info.assert_called_once_with("Product creation event received", **record)

    def test_duplicates_are_logged_twice(
        self, listener: ProductCreatedListener, log: MagicMock
    ) -> None:
        """Should not deduplicate redelivered events."""
        event = ProductCreated(product_id="p-1")
        listener.handle(event)
        listener.handle(event)
        assert log.info.call_count == 2


class TestListenerWorker:
    """Tests for ListenerWorker."""

    @pytest.mark.asyncio
    async def test_worker_drains_channel(
        self, listener: ProductCreatedListener, log: MagicMock
    ) -> None:
        """Should hand every queued event to the listener."""
        channel = InMemoryEventChannel()
        worker = ListenerWorker(channel, listener)
        worker.start()

        await channel.publish(ProductCreated(product_id="p-1"))
        await channel.publish(ProductCreated(product_id="p-2"))
        await asyncio.wait_for(channel.join(), timeout=1)
        await worker.stop()

        logged = [c.kwargs["product_id"] for c in log.info.call_args_list]
        assert logged == ["p-1", "p-2"]
        assert not worker.running

    @pytest.mark.asyncio
    async def test_worker_survives_listener_failure(self, log: MagicMock) -> None:
        """Should keep consuming after a handler error."""
        failing = MagicMock(spec=ProductCreatedListener)
        failing.handle.side_effect = [RuntimeError("boom"), None]
        channel = InMemoryEventChannel()
        worker = ListenerWorker(channel, failing)
        worker.start()

        await channel.publish(ProductCreated(product_id="p-1"))
        await channel.publish(ProductCreated(product_id="p-2"))
        await asyncio.wait_for(channel.join(), timeout=1)

        assert worker.running
        assert failing.handle.call_count == 2
        await worker.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, listener: ProductCreatedListener) -> None:
        """Should be a no-op when never started."""
        worker = ListenerWorker(InMemoryEventChannel(), listener)
        await worker.stop()
        assert not worker.running


class BrokenOnceChannel:
    """Channel whose first consumption fails before yielding anything."""

    def __init__(self, events: list[ProductCreated]) -> None:
        self.events = events
        self.attempts = 0

    async def consume(self):
        self.attempts += 1
        if self.attempts == 1:
            raise AttributeError("'int' object has no attribute 'replace'")
        for event in self.events:
            yield event


async def _wait_until_stopped(worker: ListenerWorker) -> None:
    while worker.running:
        await asyncio.sleep(0)


class TestListenerWorkerRecovery:
    """Tests for failures raised by the channel itself."""

    @pytest.mark.asyncio
    async def test_worker_resumes_after_consume_failure(
        self, listener: ProductCreatedListener, log: MagicMock
    ) -> None:
        """Should log the failure and keep delivering later events."""
        channel = BrokenOnceChannel([ProductCreated(product_id="p-1")])
        worker = ListenerWorker(channel, listener, restart_delay=0)
        worker.start()

        await asyncio.wait_for(_wait_until_stopped(worker), timeout=1)
        await worker.stop()

        assert channel.attempts == 2
        assert [c.kwargs["product_id"] for c in log.info.call_args_list] == ["p-1"]


class TestCreationScenario:
    """End-to-end flow from service to listener."""

    @pytest.mark.asyncio
    async def test_created_mouse_is_observed(
        self,
        transactions: TransactionManager,
        listener: ProductCreatedListener,
        log: MagicMock,
    ) -> None:
        """Should observe the created product with its id and normalized price."""
        channel = InMemoryEventChannel()
        worker = ListenerWorker(channel, listener)
        worker.start()
        service = ProductService(transactions, channel)

        created = await service.create_product(
            ProductRequest(name="Mouse", price=19.9, category="Peripherals")
        )
        await asyncio.wait_for(channel.join(), timeout=1)
        await worker.stop()

        assert str(created.price) == "19.90"
        log.info.assert_called_once()
        record = log.info.call_args.kwargs
        assert record["product_id"] == str(created.id)
        assert record["payload"]["price"] == "19.90"

        listed = await service.list_products()
        assert [p.id for p in listed] == [created.id]
