"""Registry of WebSocket subscribers waiting for reload notifications."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Protocol

from freshwind.logging import get_logger

log = get_logger("server.registry")

RELOAD_MESSAGE: dict[str, Any] = {"reload": True}


class Subscriber(Protocol):
    """The part of a WebSocket the registry relies on."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class ReloadRegistry:
    """Tracks live subscriber connections and fans out reload messages.

    Subscribers are kept by identity. A subscriber whose send fails during
    a broadcast is dropped; the browser script reconnects on its own.
    """

    def __init__(self) -> None:
        self._subscribers: set[Subscriber] = set()
        self._lock = asyncio.Lock()

    @property
    def count(self) -> int:
        """Number of live subscribers."""
        return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        return subscriber in self._subscribers

    async def register(self, subscriber: Subscriber) -> None:
        """Add a subscriber. Registering the same handle twice is a no-op."""
        async with self._lock:
            self._subscribers.add(subscriber)
            count = len(self._subscribers)
        log.debug("Subscriber registered (%d live)", count)

    async def unregister(self, subscriber: Subscriber) -> None:
        """Remove a subscriber if present."""
        async with self._lock:
            self._subscribers.discard(subscriber)
            count = len(self._subscribers)
        log.debug("Subscriber removed (%d live)", count)

    async def broadcast(self, message: dict[str, Any] | None = None) -> int:
        """Send ``message`` to every subscriber, dropping those that fail.

        Subscribers registered while the broadcast is in flight are not
        part of the snapshot and get the next one.

        Args:
            message: Payload to send; defaults to RELOAD_MESSAGE.

        Returns:
            Number of subscribers the message was delivered to.
        """
        if message is None:
            message = RELOAD_MESSAGE

        async with self._lock:
            subscribers = list(self._subscribers)

        if not subscribers:
            return 0

        delivered = 0
        dead: list[Subscriber] = []
        for subscriber in subscribers:
            try:
                await subscriber.send_json(message)
            except Exception as e:
                log.debug("Send failed, dropping subscriber: %s", e)
                dead.append(subscriber)
            else:
                delivered += 1

        if dead:
            async with self._lock:
                for subscriber in dead:
                    self._subscribers.discard(subscriber)

        log.info("Reload sent to %d client(s), %d dropped", delivered, len(dead))
        return delivered

    async def close_all(self, reason: str = "Server shutting down") -> None:
        """Close and forget every subscriber."""
        async with self._lock:
            subscribers = list(self._subscribers)
            self._subscribers.clear()

        for subscriber in subscribers:
            with contextlib.suppress(Exception):
                await subscriber.close(code=1001, reason=reason)
        log.debug("Closed %d subscriber(s)", len(subscribers))
