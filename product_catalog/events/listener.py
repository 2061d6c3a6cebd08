"""Listener for product creation events.

The listener records one structured log entry per received event. The
worker drives it from the event channel on its own asyncio task, apart
from the request that created the product.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from product_catalog.domain.events import ProductCreated
from product_catalog.events.channel import EventChannel

logger = structlog.get_logger()


def utc_now() -> datetime:
    """Current UTC time."""
    return datetime.now(timezone.utc)


class ProductCreatedListener:
    """Logs every product creation it receives.

    Example usage:
        listener = ProductCreatedListener(structlog.get_logger("listener"))
        record = listener.handle(event)
    """

    STATUS_SUCCESS = "success"

    def __init__(
        self,
        logger: Any,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize listener.

        Args:
            logger: Structured logger that receives the records.
            clock: Source of receipt timestamps.
        """
        self.logger = logger
        self.clock = clock

    def handle(self, event: ProductCreated) -> dict[str, Any]:
        """Record the receipt of a creation event.

        Args:
            event: Received event.

        Returns:
            The fields written to the log.
        """
        record = {
            "event_name": event.event_type,
            "status": self.STATUS_SUCCESS,
            "product_id": event.product_id,
            "payload": event.payload(),
            "received_at": self.clock().isoformat(),
        }
        self.logger.info("Product creation event received", **record)
        return record

class ListenerWorker:
    """Background task feeding channel events to the listener.

    A failure while reading from the channel is logged and consumption
    resumes after ``restart_delay`` seconds, so one bad record never
    silences later events.
    """

    def __init__(
        self,
        channel: EventChannel,
        listener: ProductCreatedListener,
        restart_delay: float = 1.0,
    ) -> None:
        self.channel = channel
        self.listener = listener
        self.restart_delay = restart_delay
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the consumption task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start consuming on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="product-created-listener")

    async def stop(self) -> None:
        """Cancel the consumption task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Listener task ended with an error")
        finally:
            self._task = None

    async def _run(self) -> None:
        while True:
            try:
                await self._consume()
            except Exception:
                logger.exception(
                    "Event consumption failed, restarting",
                    restart_delay=self.restart_delay,
                )
                await asyncio.sleep(self.restart_delay)
                continue
            logger.info("Event channel exhausted, listener stopped")
            return

    async def _consume(self) -> None:
        async for event in self.channel.consume():
            try:
                self.listener.handle(event)
            except Exception:
                logger.exception(
                    "Listener failed to handle event",
                    event_id=str(event.event_id),
                    product_id=event.product_id,
                )
