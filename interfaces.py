"""Protocol interfaces used by SessionController and the app shell."""

from __future__ import annotations

from queue import Queue
from typing import Callable, Protocol

from models import AudioFrame, ExportResult, Language, RecognitionEvent

EventCallback = Callable[[RecognitionEvent], None]


class Recorder(Protocol):
    def start(self, audio_queue: Queue[AudioFrame | None]) -> None: ...

    def stop(self) -> None: ...


class Recognizer(Protocol):
    """A recognizer bound to one language.

    ``start`` and ``stop`` return immediately; completion is reported
    through ``on_event`` (``started`` / ``ended`` / ``error``).
    """

    def start(self, on_event: EventCallback) -> None: ...

    def stop(self) -> None: ...


RecognizerFactory = Callable[[Language], Recognizer]


class PermissionProvider(Protocol):
    def request_microphone(self, on_result: Callable[[bool], None]) -> None: ...


class Exporter(Protocol):
    def export(self, text: str) -> ExportResult: ...


class ConfigStore(Protocol):
    def get_language(self) -> str: ...

    def set_language(self, code: str) -> None: ...

    def get_api_key(self) -> str: ...

    def set_api_key(self, key: str) -> None: ...
