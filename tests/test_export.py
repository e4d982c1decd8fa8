from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import export
from export import ClipboardExporter, FileExporter, transcript_filename


def test_clipboard_copies_text(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    monkeypatch.setattr(export, "pyperclip", fake)

    result = ClipboardExporter().export("hello world ")

    assert result.success is True
    fake.copy.assert_called_once_with("hello world ")


def test_clipboard_reports_missing_dependency(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(export, "pyperclip", None)

    result = ClipboardExporter().export("hello")

    assert result.success is False
    assert "missing" in result.reason


def test_clipboard_failure_is_reported(monkeypatch) -> None:  # noqa: ANN001
    fake = MagicMock()
    fake.copy.side_effect = RuntimeError("no clipboard mechanism")
    monkeypatch.setattr(export, "pyperclip", fake)

    result = ClipboardExporter().export("hello")

    assert result.success is False
    assert "no clipboard mechanism" in result.reason


def test_clipboard_rejects_empty_text() -> None:
    result = ClipboardExporter().export("   ")
    assert result.success is False
    assert result.reason == "empty text"


def test_file_export_writes_dated_file(tmp_path: Path) -> None:
    exporter = FileExporter(tmp_path / "out", today=lambda: date(2024, 3, 9))

    result = exporter.export("first line\nsecond ")

    assert result.success is True
    path = tmp_path / "out" / "transcript-2024-03-09.txt"
    assert result.path == str(path)
    assert path.read_text(encoding="utf-8") == "first line\nsecond "


def test_file_export_failure_is_reported(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    result = FileExporter(blocker).export("text")

    assert result.success is False
    assert result.reason.startswith("Export failed")


def test_transcript_filename() -> None:
    assert transcript_filename(date(2026, 1, 2)) == "transcript-2026-01-02.txt"
