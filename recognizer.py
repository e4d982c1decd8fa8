"""Real-time recognizer binding using DashScope streaming ASR.

Microphone frames from a :class:`recorder.SoundDeviceRecorder` are pumped
into ``dashscope.audio.asr.Recognition`` on a worker thread. The SDK's
callbacks are translated into :class:`models.RecognitionEvent` values:
``on_open`` -> started, ``on_event`` -> result, ``on_error`` -> error,
``on_complete``/``on_close`` -> ended. Each stream ends exactly once, with
either an ``ended`` or an ``error`` event.
"""

from __future__ import annotations

import os
import threading
from queue import Empty, Queue
from typing import Any, Callable, Optional

from interfaces import EventCallback, Recorder
from languages import primary_subtag
from logger import get_logger
from models import AudioFrame, Language, RecognitionEvent, Segment
from recorder import SoundDeviceRecorder, has_input_device

try:
    import dashscope
    from dashscope.audio.asr import Recognition, RecognitionCallback, RecognitionResult
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore
    Recognition = None  # type: ignore
    RecognitionCallback = object  # type: ignore
    RecognitionResult = None  # type: ignore

logger = get_logger(__name__)

DEFAULT_MODEL = "paraformer-realtime-v2"


def recognizer_available() -> bool:
    """Probe for the SDK and a capture device."""
    return dashscope is not None and Recognition is not None and has_input_device()


def _error_kind(message: str) -> str:
    """Map an SDK/network failure text to a recognizer error kind."""
    low = message.lower()
    if "no_valid_audio" in low or "no valid audio" in low or "no speech" in low:
        return "no-speech"
    if "401" in low or "auth" in low or "api key" in low or "apikey" in low:
        return "auth-failed"
    if "timeout" in low or "network" in low or "connection" in low:
        return "network"
    return "recognizer-error"


class _Stream:
    """One capture-and-recognize run of a binding."""

    def __init__(self, recorder: Recorder, on_event: EventCallback, queue_maxsize: int) -> None:
        self.recorder = recorder
        self.audio_queue: Queue[AudioFrame | None] = Queue(maxsize=queue_maxsize)
        self.stop_event = threading.Event()
        self._on_event = on_event
        self._lock = threading.Lock()
        self.finished = False
        self.committed = 0

    def emit(self, event: RecognitionEvent) -> None:
        if self.finished:
            return
        self._on_event(event)

    def finish(self, event: RecognitionEvent) -> None:
        with self._lock:
            if self.finished:
                return
            self.finished = True
        self._on_event(event)

    def stop_recorder(self) -> None:
        try:
            self.recorder.stop()
        except Exception as exc:  # pragma: no cover
            logger.warning("Recorder stop failed: %s", exc)


class _StreamCallback(RecognitionCallback):
    def __init__(self, stream: _Stream) -> None:
        super().__init__()
        self._stream = stream

    def on_open(self) -> None:
        self._stream.emit(RecognitionEvent.started())

    def on_event(self, result: Any) -> None:
        event = _result_event(self._stream, result.get_sentence())
        if event is not None:
            self._stream.emit(event)

    def on_error(self, result: Any) -> None:
        message = str(getattr(result, "message", "") or result)
        self._stream.finish(RecognitionEvent.error(_error_kind(message), message))
        self._stream.stop_event.set()
        self._stream.stop_recorder()

    def on_complete(self) -> None:
        self._stream.finish(RecognitionEvent.ended())

    def on_close(self) -> None:
        self._stream.finish(RecognitionEvent.ended())


def _result_event(stream: _Stream, sentence: Any) -> Optional[RecognitionEvent]:
    sentences = sentence if isinstance(sentence, list) else [sentence]
    segments: list[Segment] = []
    for item in sentences:
        if not isinstance(item, dict) or "text" not in item:
            continue
        confidence = item.get("confidence")
        segments.append(
            Segment(
                text=str(item["text"]),
                is_final=RecognitionResult.is_sentence_end(item),
                confidence=float(confidence) if confidence is not None else None,
            )
        )
    if not segments:
        return None
    index = stream.committed
    stream.committed += sum(1 for s in segments if s.is_final)
    return RecognitionEvent.result(segments, result_index=index)


class DashscopeRecognizer:
    def __init__(
        self,
        language: Language,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        recorder_factory: Optional[Callable[[], Recorder]] = None,
        sample_rate: int = 16000,
        queue_maxsize: int = 50,
    ) -> None:
        self.language = language
        self._api_key = api_key
        self._model = model
        self._recorder_factory = recorder_factory or (lambda: SoundDeviceRecorder(sample_rate=sample_rate))
        self._sample_rate = sample_rate
        self._queue_maxsize = queue_maxsize

        self._lock = threading.Lock()
        self._stream: Optional[_Stream] = None
        self._thread: Optional[threading.Thread] = None

    def start(self, on_event: EventCallback) -> None:
        with self._lock:
            if self._stream is not None and not self._stream.finished:
                return
            stream = _Stream(self._recorder_factory(), on_event, self._queue_maxsize)
            self._stream = stream
            self._thread = threading.Thread(
                target=self._worker, args=(stream,), name="dashscope-pump", daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        """Request the end of capture; ``ended`` follows asynchronously."""
        stream = self._stream
        if stream is None or stream.finished:
            return
        stream.stop_event.set()
        stream.stop_recorder()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _worker(self, stream: _Stream) -> None:
        if dashscope is None or Recognition is None:
            stream.finish(RecognitionEvent.error("service-unavailable", "dashscope is not installed"))
            return

        api_key = self._api_key or os.getenv("DASHSCOPE_API_KEY", "")
        if not api_key:
            stream.finish(RecognitionEvent.error("auth-failed", "No API key configured"))
            return
        dashscope.api_key = api_key

        try:
            recognition = Recognition(
                model=self._model,
                callback=_StreamCallback(stream),
                format="pcm",
                sample_rate=self._sample_rate,
                language_hints=[primary_subtag(self.language.code)],
            )
            recognition.start()
        except Exception as exc:
            stream.finish(RecognitionEvent.error(_error_kind(str(exc)), str(exc)))
            return

        try:
            stream.recorder.start(stream.audio_queue)
        except Exception as exc:
            logger.warning("Audio capture failed to start: %s", exc)
            stream.finish(RecognitionEvent.error("audio-capture", str(exc)))
            self._safe_stop_recognition(recognition)
            return

        if stream.stop_event.is_set():
            # stop() may have raced ahead of the recorder starting.
            stream.stop_recorder()

        self._pump(stream, recognition)
        self._safe_stop_recognition(recognition)
        stream.finish(RecognitionEvent.ended())

    def _pump(self, stream: _Stream, recognition: Any) -> None:
        while not stream.finished:
            try:
                frame = stream.audio_queue.get(timeout=0.2)
            except Empty:
                if stream.stop_event.is_set():
                    return
                continue
            if frame is None:  # Sentinel
                return
            try:
                recognition.send_audio_frame(frame.pcm16_bytes)
            except Exception as exc:
                stream.finish(RecognitionEvent.error(_error_kind(str(exc)), str(exc)))
                stream.stop_recorder()
                return

    def _safe_stop_recognition(self, recognition: Any) -> None:
        try:
            recognition.stop()
        except Exception as exc:
            logger.debug("Recognition stop raised: %s", exc)
