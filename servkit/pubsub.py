"""Topic-based publish/subscribe with per-subscription keys."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Protocol

_key_counter = itertools.count(1)
_key_lock = threading.Lock()


def _gen_key() -> int:
    with _key_lock:
        return next(_key_counter)


class Subscriber(Protocol):
    def on_subscribe(self, key: int) -> None: ...

    def on_event(self, *args: Any) -> None: ...


class BaseSubscriber:
    """Subscriber that remembers its key and forwards events to ``handler``."""

    def __init__(self, handler: Callable[..., Any] | None = None) -> None:
        self.key = 0
        self._handler = handler

    def on_subscribe(self, key: int) -> None:
        self.key = key

    def on_event(self, *args: Any) -> None:
        if self._handler is not None:
            self._handler(*args)


@dataclass
class _Subscription:
    subscriber: Subscriber
    topic: int


class Publisher:
    """Delivers published events to subscribers in subscription order."""

    def __init__(self) -> None:
        self._subscriptions: dict[int, _Subscription] = {}
        self._topics: dict[int, dict[int, None]] = {}

    def publish(self, topic: int, *args: Any) -> None:
        for key in list(self._topics.get(topic, ())):
            subscription = self._subscriptions.get(key)
            if subscription is not None:
                subscription.subscriber.on_event(*args)

    def subscribe(self, topic: int, subscriber: Subscriber) -> bool:
        """Subscribe to ``topic`` (which must not be 0); the key goes to ``on_subscribe``."""
        if topic == 0:
            return False
        key = _gen_key()
        self._topics.setdefault(topic, {})[key] = None
        self._subscriptions[key] = _Subscription(subscriber, topic)
        subscriber.on_subscribe(key)
        return True

    def unsubscribe(self, topic: int) -> None:
        """Drop every subscription to ``topic``."""
        for key in self._topics.pop(topic, {}):
            self._subscriptions.pop(key, None)

    def unsubscribe_key(self, key: int) -> None:
        """Drop the single subscription identified by ``key``."""
        subscription = self._subscriptions.pop(key, None)
        if subscription is None:
            return
        keys = self._topics.get(subscription.topic)
        if keys is not None:
            keys.pop(key, None)