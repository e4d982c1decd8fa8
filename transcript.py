"""Folds recognition events into an editable transcript."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from errors import classify_error
from logger import get_logger
from models import RecognitionEvent, RecognitionKind

ChangeCallback = Callable[[str], None]

logger = get_logger(__name__)


@dataclass(frozen=True)
class Transcript:
    finalized: tuple[str, ...] = ()
    tentative: str = ""
    confidence: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(fragment + " " for fragment in self.finalized) + self.tentative


def edit_echo(text: str) -> str:
    """The text a reconciler reports after ``edit(text)``."""
    fragment = text.rstrip()
    return fragment + " " if fragment else ""


class TranscriptReconciler:
    """Keeps committed text and the in-progress hypothesis apart.

    Final segments are appended to ``finalized`` once and never touched
    again. Interim segments replace ``tentative`` wholesale on every result
    event, because the recognizer resends the full hypothesis rather than a
    delta. The materialized text is always the finalized fragments, each
    followed by a space, then the tentative text.
    """

    def __init__(self, on_change: Optional[ChangeCallback] = None) -> None:
        self._on_change = on_change
        self._lock = threading.RLock()
        self._finalized: list[str] = []
        self._tentative = ""
        self._confidence: Optional[float] = None
        self._error_message = ""
        self._result_index = 0

    @property
    def finalized(self) -> list[str]:
        with self._lock:
            return list(self._finalized)

    @property
    def tentative(self) -> str:
        return self._tentative

    @property
    def confidence(self) -> Optional[float]:
        return self._confidence

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def text(self) -> str:
        return self.snapshot().text

    def snapshot(self) -> Transcript:
        with self._lock:
            return Transcript(tuple(self._finalized), self._tentative, self._confidence)

    def handle(self, event: RecognitionEvent) -> None:
        with self._lock:
            before = self.snapshot()
            kind = event.kind
            if kind == RecognitionKind.STARTED.value:
                self._tentative = ""
                self._error_message = ""
                self._result_index = 0
            elif kind == RecognitionKind.RESULT.value:
                if event.result_index < self._result_index:
                    logger.warning(
                        "Ignoring result with index %d behind %d", event.result_index, self._result_index
                    )
                    return
                self._result_index = event.result_index
                self._apply_result(event)
            elif kind == RecognitionKind.ENDED.value:
                self._tentative = ""
            elif kind == RecognitionKind.ERROR.value:
                self._tentative = ""
                self._error_message = classify_error(event.code, event.message).message
            changed = self.snapshot() != before
        if changed:
            self._notify()

    def _apply_result(self, event: RecognitionEvent) -> None:
        interim: list[str] = []
        for segment in event.segments:
            if segment.is_final:
                self._finalized.append(segment.text)
                self._confidence = segment.confidence
            else:
                interim.append(segment.text)
        # Finals are committed above before the hypothesis is swapped.
        self._tentative = "".join(interim)

    def clear(self) -> None:
        with self._lock:
            self._finalized = []
            self._tentative = ""
            self._confidence = None
        self._notify()

    def edit(self, text: str) -> None:
        """Replace the whole transcript with user-edited ``text``.

        The edit becomes a single finalized fragment so later recognition
        keeps appending after it instead of dropping it.
        """
        with self._lock:
            fragment = text.rstrip()
            self._finalized = [fragment] if fragment else []
            self._tentative = ""
        self._notify()

    def _notify(self) -> None:
        if self._on_change:
            self._on_change(self.text)
