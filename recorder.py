"""Microphone capture for the recognizer binding.

The PortAudio callback wraps every block in an :class:`models.AudioFrame`
and offers it to a bounded queue without blocking. A full queue drops the
block. ``stop()`` always ends the queue with a ``None`` sentinel so the
consumer's loop terminates.
"""

from __future__ import annotations

import threading
import time
from queue import Full, Queue
from typing import Any, Optional

from logger import get_logger
from models import AudioFrame

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = get_logger(__name__)

FrameQueue = Queue[Optional[AudioFrame]]


def has_input_device() -> bool:
    """True when sounddevice is importable and a default input exists."""
    if sd is None:
        return False
    try:
        sd.query_devices(kind="input")
    except Exception:
        return False
    return True


class SoundDeviceRecorder:
    """16-bit PCM capture from one input device in ``chunk_ms`` blocks."""

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        chunk_ms: int = 100,
        device: Optional[int] = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.chunk_ms = chunk_ms
        self.device = device
        self.dropped_chunks = 0
        self.overflows = 0
        self._lock = threading.Lock()
        self._stream: Any = None
        self._target: Optional[FrameQueue] = None

    @property
    def running(self) -> bool:
        return self._stream is not None

    @property
    def blocksize(self) -> int:
        return self.sample_rate * self.chunk_ms // 1000

    def start(self, audio_queue: FrameQueue) -> None:
        with self._lock:
            if self._stream is not None:
                return
            if sd is None:
                raise RuntimeError("sounddevice is not installed")
            self._target = audio_queue
            self.dropped_chunks = 0
            self.overflows = 0
            self._stream = self._open_stream()
            try:
                self._stream.start()
            except Exception:
                self._stream.close()
                self._stream = None
                raise
        logger.debug("Capture started: %d Hz, %d-sample blocks", self.sample_rate, self.blocksize)

    def stop(self) -> None:
        with self._lock:
            stream, self._stream = self._stream, None
            if stream is not None:
                self._close_stream(stream)
            self._offer(None)

    def _open_stream(self) -> Any:
        return sd.InputStream(
            samplerate=self.sample_rate,
            channels=self.channels,
            dtype="int16",
            blocksize=self.blocksize,
            device=self.device,
            callback=self._on_audio,
        )

    def _close_stream(self, stream: Any) -> None:
        try:
            stream.stop()
        finally:
            stream.close()
        if self.dropped_chunks or self.overflows:
            logger.warning(
                "Capture lost audio: %d blocks dropped (queue full), %d input overflows",
                self.dropped_chunks,
                self.overflows,
            )

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if self._stream is None or np is None:
            return
        if status:
            self.overflows += 1
        if not self._offer(self._frame(indata)):
            self.dropped_chunks += 1

    def _frame(self, block: Any) -> AudioFrame:
        return AudioFrame(
            pcm16_bytes=np.asarray(block, dtype=np.int16).tobytes(),
            sample_rate=self.sample_rate,
            channels=self.channels,
            timestamp_ms=int(time.time() * 1000),
        )

    def _offer(self, item: Optional[AudioFrame]) -> bool:
        if self._target is None:
            return False
        try:
            self._target.put_nowait(item)
        except Full:
            return False
        return True
