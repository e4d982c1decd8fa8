"""Microphone access check."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from logger import get_logger

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = get_logger(__name__)


class SoundDevicePermissionProvider:
    """Grants access when an input stream can be opened on the device.

    Opening the stream is what triggers the operating system's microphone
    prompt, so the check runs on a worker thread and reports back through
    ``on_result`` whenever the user answers.
    """

    def __init__(self, sample_rate: int = 16000, device: Optional[int] = None, threaded: bool = True) -> None:
        self._sample_rate = sample_rate
        self._device = device
        self._threaded = threaded

    def request_microphone(self, on_result: Callable[[bool], None]) -> None:
        if not self._threaded:
            on_result(self._probe())
            return
        threading.Thread(
            target=lambda: on_result(self._probe()),
            name="mic-permission",
            daemon=True,
        ).start()

    def _probe(self) -> bool:
        if sd is None:
            logger.warning("sounddevice is not installed; microphone unavailable")
            return False
        try:
            sd.check_input_settings(device=self._device, samplerate=self._sample_rate, channels=1, dtype="int16")
            stream = sd.InputStream(samplerate=self._sample_rate, channels=1, dtype="int16", device=self._device)
            stream.start()
            stream.stop()
            stream.close()
        except Exception as exc:
            logger.info("Microphone access refused: %s", exc)
            return False
        return True
