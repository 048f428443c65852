"""
Change notifier: periodic state snapshots pushed to every subscriber.

Each subscription owns its timer and its event id sequence (starting at 0).
The first event is produced immediately, later ones every ``interval_s``.
Waiting is cooperative: ``close()`` wakes a sleeping subscription at once,
and the subscription drops out of the notifier registry when it ends.
"""
import asyncio, itertools, json, logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotEvent:
    id: int
    data: Dict[str, Any]
    event: str = "update"

    def to_sse(self) -> str:
        return f"event: {self.event}\nid: {self.id}\ndata: {json.dumps(self.data, ensure_ascii=False)}\n\n"


class Subscription:
    def __init__(self, notifier: "ChangeNotifier", key: int):
        self._notifier = notifier
        self.key = key
        self._closed = asyncio.Event()
        self._next_id = 0
        self._started = False

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        if not self._closed.is_set():
            self._closed.set()
            self._notifier._release(self)

    def __aiter__(self):
        return self

    async def __anext__(self) -> SnapshotEvent:
        while True:
            if self.closed:
                raise StopAsyncIteration
            if self._started:
                try:
                    await asyncio.wait_for(self._closed.wait(), timeout=self._notifier.interval_s)
                except asyncio.TimeoutError:
                    pass
                except asyncio.CancelledError:
                    self.close()
                    raise
                if self.closed:
                    raise StopAsyncIteration
            self._started = True

            try:
                data = self._notifier.read_snapshot()
            except Exception:
                # 스냅샷 실패 시 해당 tick만 건너뜀
                logger.exception(f"Snapshot read failed for subscription {self.key}; skipping tick")
                continue

            event = SnapshotEvent(id=self._next_id, data=data)
            self._next_id += 1
            return event


class ChangeNotifier:
    """One per process; shared by all subscribers. Never mutates the store."""

    def __init__(self, read_snapshot: Callable[[], Dict[str, Any]], interval_s: float = 2.0):
        self.read_snapshot = read_snapshot
        self.interval_s = interval_s
        self._subscriptions: Dict[int, Subscription] = {}
        self._keys = itertools.count(1)

    @property
    def active_subscriptions(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        sub = Subscription(self, next(self._keys))
        self._subscriptions[sub.key] = sub
        logger.info(json.dumps({"event": "subscribe", "subscription": sub.key,
                                "active": len(self._subscriptions)}))
        return sub

    def _release(self, sub: Subscription) -> None:
        if self._subscriptions.pop(sub.key, None) is not None:
            logger.info(json.dumps({"event": "unsubscribe", "subscription": sub.key,
                                    "active": len(self._subscriptions)}))

    def close_all(self) -> None:
        for sub in list(self._subscriptions.values()):
            sub.close()

    async def stream(self, is_disconnected: Optional[Callable[[], Any]] = None):
        """SSE-framed snapshot text for a new subscription.

        The subscription is only registered once the consumer starts iterating,
        and is closed when the consumer goes away.
        """
        sub = self.subscribe()
        try:
            async for event in sub:
                if is_disconnected is not None and await is_disconnected():
                    break
                yield event.to_sse()
        finally:
            sub.close()
