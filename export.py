"""Clipboard and plain-text file export of the transcript."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Callable, Optional

from errors import ERROR_MESSAGES, EXPORT_FAILED
from logger import get_logger
from models import ExportResult

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

logger = get_logger(__name__)


def transcript_filename(day: date) -> str:
    return f"transcript-{day.isoformat()}.txt"


class ClipboardExporter:
    def export(self, text: str) -> ExportResult:
        if not text.strip():
            return ExportResult(success=False, reason="empty text")
        if pyperclip is None:
            return ExportResult(success=False, reason="clipboard dependency missing")
        try:
            pyperclip.copy(text)
        except Exception as exc:
            logger.warning("Clipboard write failed: %s", exc)
            return ExportResult(success=False, reason=ERROR_MESSAGES[EXPORT_FAILED].format(detail=exc))
        return ExportResult(success=True, reason="ok")


class FileExporter:
    """Writes the transcript verbatim to ``transcript-<date>.txt``."""

    def __init__(self, directory: Path, today: Optional[Callable[[], date]] = None) -> None:
        self._directory = Path(directory)
        self._today = today or date.today

    def export(self, text: str) -> ExportResult:
        if not text.strip():
            return ExportResult(success=False, reason="empty text")
        path = self._directory / transcript_filename(self._today())
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("Transcript download failed: %s", exc)
            return ExportResult(success=False, reason=ERROR_MESSAGES[EXPORT_FAILED].format(detail=exc))
        logger.info("Transcript saved to %s", path)
        return ExportResult(success=True, reason="ok", path=str(path))
