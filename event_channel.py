"""Ordered publish/subscribe channel for recognition events.

Recognizer callbacks arrive on SDK threads; everything downstream (the
transcript, the window) sees them here, one at a time and in publish
order. Without a dispatcher thread the channel drains on the publishing
thread; a subscriber that publishes while being dispatched only enqueues,
and the outer drain loop picks the event up afterwards.
"""

from __future__ import annotations

import threading
from queue import Empty, Queue
from typing import Callable, Optional

from logger import get_logger
from models import RecognitionEvent

Subscriber = Callable[[RecognitionEvent], None]

logger = get_logger(__name__)


class EventChannel:
    def __init__(self) -> None:
        self._queue: Queue[RecognitionEvent | None] = Queue()
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()
        self._dispatch_lock = threading.RLock()
        self._dispatching = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber``; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            with self._lock:
                if subscriber in self._subscribers:
                    self._subscribers.remove(subscriber)

        return _unsubscribe

    def publish(self, event: RecognitionEvent) -> None:
        self._queue.put(event)
        if self._thread is None:
            self.drain()

    def drain(self) -> int:
        """Deliver every queued event on the calling thread."""
        delivered = 0
        with self._dispatch_lock:
            if self._dispatching:
                return 0
            self._dispatching = True
            try:
                while True:
                    try:
                        event = self._queue.get_nowait()
                    except Empty:
                        break
                    if event is None:
                        continue
                    self._deliver(event)
                    delivered += 1
            finally:
                self._dispatching = False
        return delivered

    # ------------------------------------------------------------------
    # Dispatcher thread
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._worker, name="event-channel", daemon=True)
        self._thread.start()

    def close(self, timeout: float = 1.0) -> None:
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        self._queue.put(None)
        thread.join(timeout=timeout)
        self._thread = None
        # Anything published after the sentinel is still delivered.
        self.drain()

    def _worker(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = self._queue.get(timeout=0.2)
            except Empty:
                continue
            if event is None:
                break
            with self._dispatch_lock:
                self._deliver(event)

    def _deliver(self, event: RecognitionEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception("Subscriber failed on %s event", event.kind)
