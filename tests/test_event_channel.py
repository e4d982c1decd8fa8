from __future__ import annotations

import threading
import time

from event_channel import EventChannel
from models import RecognitionEvent, RecognitionKind, Segment


def test_inline_publish_delivers_in_order_to_all_subscribers() -> None:
    channel = EventChannel()
    first: list[str] = []
    second: list[str] = []
    channel.subscribe(lambda e: first.append(e.kind))
    channel.subscribe(lambda e: second.append(e.kind))

    channel.publish(RecognitionEvent.started())
    channel.publish(RecognitionEvent.result([Segment("hi")]))
    channel.publish(RecognitionEvent.ended())

    assert first == ["started", "result", "ended"]
    assert second == first


def test_publish_from_subscriber_is_delivered_after_current_event() -> None:
    channel = EventChannel()
    seen: list[str] = []

    def republish(event: RecognitionEvent) -> None:
        seen.append(event.kind)
        if event.kind == RecognitionKind.ERROR.value:
            channel.publish(RecognitionEvent.ended())

    def tail(event: RecognitionEvent) -> None:
        seen.append("tail:" + event.kind)

    channel.subscribe(republish)
    channel.subscribe(tail)
    channel.publish(RecognitionEvent.error("network"))

    assert seen == ["error", "tail:error", "ended", "tail:ended"]


def test_unsubscribe_stops_delivery() -> None:
    channel = EventChannel()
    seen: list[str] = []
    unsubscribe = channel.subscribe(lambda e: seen.append(e.kind))

    channel.publish(RecognitionEvent.started())
    unsubscribe()
    channel.publish(RecognitionEvent.ended())

    assert seen == ["started"]


def test_failing_subscriber_does_not_block_others() -> None:
    channel = EventChannel()
    seen: list[str] = []

    def broken(event: RecognitionEvent) -> None:
        raise ValueError("boom")

    channel.subscribe(broken)
    channel.subscribe(lambda e: seen.append(e.kind))
    channel.publish(RecognitionEvent.started())

    assert seen == ["started"]


def test_dispatcher_thread_preserves_order_across_publishers() -> None:
    channel = EventChannel()
    seen: list[int] = []
    lock = threading.Lock()
    active = {"count": 0, "max": 0}

    def record(event: RecognitionEvent) -> None:
        with lock:
            active["count"] += 1
            active["max"] = max(active["max"], active["count"])
        seen.append(event.result_index)
        time.sleep(0.001)
        with lock:
            active["count"] -= 1

    channel.subscribe(record)
    channel.start()
    for index in range(20):
        channel.publish(RecognitionEvent.result([Segment("x")], result_index=index))
    channel.close()

    assert seen == list(range(20))
    assert active["max"] == 1


def test_close_without_start_is_noop() -> None:
    channel = EventChannel()
    channel.close()
    seen: list[str] = []
    channel.subscribe(lambda e: seen.append(e.kind))
    channel.publish(RecognitionEvent.ended())
    assert seen == ["ended"]
