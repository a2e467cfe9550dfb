import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from app.messages import TOPIC_IMAGE, TOPIC_POINTER, ImageUpdate, PointerLocation

logger = logging.getLogger(__name__)

T = TypeVar("T")
Handler = Callable[[T], Coroutine[Any, Any, None]]

DEFAULT_QUEUE_SIZE = 16


class _Subscription:
    """Очередь сообщений одного подписчика и задача, которая её разбирает."""

    def __init__(self, topic: str, handler: Handler[Any], queue_size: int) -> None:
        self.topic = topic
        self.handler = handler
        self.queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=queue_size)
        self.task = asyncio.create_task(self._deliver(), name=f"bus:{topic}")

    def offer(self, message: Any) -> bool:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    async def _deliver(self) -> None:
        while True:
            message = await self.queue.get()
            try:
                await self.handler(message)
            except Exception as exc:
                logger.warning("Subscriber of %s failed: %s", self.topic, exc)
            finally:
                self.queue.task_done()


class EventBus:
    """
    Topic based fan-out to the currently subscribed handlers.

    Publishing never waits for delivery: every subscriber has its own bounded
    queue, and a message is dropped for a subscriber whose queue is full.
    Delivery is at most once per subscriber; nothing is kept for subscribers
    that join later.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self.queue_size = queue_size
        self._subscribers: dict[str, list[_Subscription]] = defaultdict(list)

    async def subscribe(self, topic: str, handler: Handler[T]) -> None:
        self._subscribers[topic].append(_Subscription(topic, handler, self.queue_size))

    async def unsubscribe(self, topic: str, handler: Handler[T]) -> None:
        subscriptions = self._subscribers.get(topic, [])
        for subscription in [s for s in subscriptions if s.handler is handler]:
            subscriptions.remove(subscription)
            subscription.task.cancel()

    async def publish(self, topic: str, message: T) -> None:
        for subscription in list(self._subscribers.get(topic, [])):
            if not subscription.offer(message):
                logger.debug("Subscriber of %s is lagging, message dropped", topic)

    async def join(self) -> None:
        """Дождаться доставки всех уже опубликованных сообщений."""
        subscriptions = [s for subs in self._subscribers.values() for s in subs]
        await asyncio.gather(*(s.queue.join() for s in subscriptions))

    async def close(self) -> None:
        subscriptions = [s for subs in self._subscribers.values() for s in subs]
        self._subscribers.clear()
        for subscription in subscriptions:
            subscription.task.cancel()
        await asyncio.gather(*(s.task for s in subscriptions), return_exceptions=True)

    async def publish_pointer(self, location: PointerLocation) -> None:
        await self.publish(TOPIC_POINTER, location)

    async def publish_image(self, update: ImageUpdate) -> None:
        await self.publish(TOPIC_IMAGE, update)
