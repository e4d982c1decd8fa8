"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SessionState(str, Enum):
    IDLE = "IDLE"
    ACQUIRING_PERMISSION = "ACQUIRING_PERMISSION"
    LISTENING = "LISTENING"
    STOPPED = "STOPPED"
    FAILED = "FAILED"


class RecognitionKind(str, Enum):
    STARTED = "started"
    RESULT = "result"
    ERROR = "error"
    ENDED = "ended"


@dataclass(frozen=True)
class Language:
    code: str
    name: str


@dataclass
class AudioFrame:
    pcm16_bytes: bytes
    sample_rate: int = 16000
    channels: int = 1
    timestamp_ms: int = 0


@dataclass(frozen=True)
class Segment:
    text: str
    is_final: bool = False
    confidence: Optional[float] = None


@dataclass
class RecognitionEvent:
    """One notification from a recognizer binding.

    ``segments`` holds only the results that are new since the previous
    event; ``result_index`` is the recognizer's boundary index for them.
    For errors, ``code`` is the recognizer-reported kind (``no-speech``,
    ``not-allowed``...) and ``message`` its detail.
    """

    kind: str
    segments: list[Segment] = field(default_factory=list)
    result_index: int = 0
    code: str = ""
    message: str = ""

    @classmethod
    def started(cls) -> "RecognitionEvent":
        return cls(kind=RecognitionKind.STARTED.value)

    @classmethod
    def result(cls, segments: list[Segment], result_index: int = 0) -> "RecognitionEvent":
        return cls(kind=RecognitionKind.RESULT.value, segments=list(segments), result_index=result_index)

    @classmethod
    def error(cls, code: str, message: str = "") -> "RecognitionEvent":
        return cls(kind=RecognitionKind.ERROR.value, code=code, message=message)

    @classmethod
    def ended(cls) -> "RecognitionEvent":
        return cls(kind=RecognitionKind.ENDED.value)


@dataclass(frozen=True)
class SessionError:
    code: str
    message: str
    retryable: bool = True


@dataclass
class ExportResult:
    success: bool
    reason: str
    path: str = ""
