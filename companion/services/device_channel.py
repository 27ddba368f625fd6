"""Outbound message channel to the watch.

Connected device streams each own a bounded queue. ``send`` fans a message
out to every queue and hands back a future that settles when the device
acknowledges the transaction. There is no timeout; an unacknowledged send
stays pending.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import asdict, dataclass, field
from queue import Full, Queue
from threading import Lock
from time import time
from typing import Any, Dict, List, Mapping

from companion.bridge.errors import TransportError

_LOG = logging.getLogger(__name__)

_QUEUE_MAXSIZE = 100


@dataclass(slots=True)
class OutboundMessage:
    transactionId: int
    payload: Dict[str, Any] = field(default_factory=dict)
    ts: int = 0

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class DeviceMessageChannel:
    def __init__(self, queue_maxsize: int = _QUEUE_MAXSIZE) -> None:
        self._queue_maxsize = queue_maxsize
        self._subscribers: List[Queue[OutboundMessage]] = []
        self._pending: Dict[int, asyncio.Future[int]] = {}
        self._ids = itertools.count(1)
        self._lock = Lock()

    def subscribe(self) -> Queue[OutboundMessage]:
        queue: Queue[OutboundMessage] = Queue(maxsize=self._queue_maxsize)
        with self._lock:
            self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: Queue[OutboundMessage]) -> None:
        # Pending sends stay pending; a reconnected device may still ack them.
        with self._lock:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    def connected(self) -> bool:
        with self._lock:
            return bool(self._subscribers)

    def send(self, payload: Mapping[str, Any]) -> asyncio.Future[int]:
        """Queue *payload* for the device; must be called on the event loop."""

        loop = asyncio.get_running_loop()
        future: asyncio.Future[int] = loop.create_future()
        message = OutboundMessage(
            transactionId=next(self._ids),
            payload=dict(payload),
            ts=int(time() * 1000),
        )

        delivered = 0
        with self._lock:
            subscribers = list(self._subscribers)
            for queue in subscribers:
                try:
                    queue.put_nowait(message)
                except Full:
                    continue
                delivered += 1
            if delivered:
                self._pending[message.transactionId] = future

        if not subscribers:
            future.set_exception(
                TransportError("no device connected", message.transactionId)
            )
        elif not delivered:
            future.set_exception(
                TransportError("device outbox full", message.transactionId)
            )
        else:
            _LOG.debug(
                "queued message %s for %d stream(s)", message.transactionId, delivered
            )
        return future

    def ack(self, transaction_id: int) -> bool:
        future = self._pop_pending(transaction_id)
        if future is None:
            return False
        if not future.done():
            future.set_result(transaction_id)
        return True

    def nack(self, transaction_id: int, error: str | None = None) -> bool:
        future = self._pop_pending(transaction_id)
        if future is None:
            return False
        if not future.done():
            future.set_exception(
                TransportError(error or "device rejected message", transaction_id)
            )
        return True

    def _pop_pending(self, transaction_id: int) -> asyncio.Future[int] | None:
        with self._lock:
            return self._pending.pop(transaction_id, None)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def reset(self) -> None:
        with self._lock:
            self._subscribers.clear()
            self._pending.clear()


__all__ = ["DeviceMessageChannel", "OutboundMessage"]
