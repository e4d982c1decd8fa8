"""Main dictation window."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from models import Language, SessionState
from transcript import edit_echo

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtGui import QTextCursor
    from PySide6.QtWidgets import (
        QComboBox,
        QHBoxLayout,
        QLabel,
        QPlainTextEdit,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QTextCursor = None  # type: ignore
    QWidget = object  # type: ignore

FEEDBACK_MS = 2000

_ERROR_STYLE = (
    "color: #B00020; background: #FDECEA; border: 1px solid #F5C2C0;"
    "border-radius: 6px; padding: 8px;"
)


class MainWindow(QWidget):
    def __init__(
        self,
        languages: Sequence[Language],
        current: Language,
        on_language: Callable[[str], None],
        on_toggle: Callable[[], None],
        on_clear: Callable[[], None],
        on_edit: Callable[[str], None],
        on_copy: Callable[[], bool],
        on_download: Callable[[], bool],
    ) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        self.setWindowTitle("Speech to Text")
        self.resize(720, 560)

        self._on_edit = on_edit
        self._on_copy = on_copy
        self._on_download = on_download
        self._updating = False
        # Text the reconciler will report back for the edit in progress.
        self._echo: Optional[str] = None

        self._language_box = QComboBox()
        for language in languages:
            self._language_box.addItem(language.name, language.code)
        self._language_box.setCurrentIndex(max(0, self._language_box.findData(current.code)))
        self._language_box.currentIndexChanged.connect(
            lambda _index: on_language(self._language_box.currentData())
        )

        self._toggle_button = QPushButton("Start Recording")
        self._toggle_button.clicked.connect(on_toggle)
        self._clear_button = QPushButton("Clear")
        self._clear_button.clicked.connect(on_clear)
        self._status_label = QLabel("")

        self._error_label = QLabel("")
        self._error_label.setWordWrap(True)
        self._error_label.setStyleSheet(_ERROR_STYLE)
        self._error_label.hide()

        self._editor = QPlainTextEdit()
        self._editor.setPlaceholderText("Your speech will appear here...")
        self._editor.textChanged.connect(self._on_text_changed)

        self._confidence_label = QLabel("")
        self._copy_button = QPushButton("Copy")
        self._copy_button.clicked.connect(self._copy)
        self._download_button = QPushButton("Download")
        self._download_button.clicked.connect(self._download)

        controls = QHBoxLayout()
        controls.addWidget(self._toggle_button)
        controls.addWidget(self._clear_button)
        controls.addStretch(1)
        controls.addWidget(self._status_label)

        exports = QHBoxLayout()
        exports.addWidget(self._confidence_label)
        exports.addStretch(1)
        exports.addWidget(self._copy_button)
        exports.addWidget(self._download_button)

        layout = QVBoxLayout()
        layout.addWidget(QLabel("Language"))
        layout.addWidget(self._language_box)
        layout.addLayout(controls)
        layout.addWidget(self._error_label)
        layout.addWidget(self._editor, 1)
        layout.addLayout(exports)
        self.setLayout(layout)

        self._refresh_buttons()

    # ------------------------------------------------------------------
    # Updates from the app (UI thread only)
    # ------------------------------------------------------------------

    def set_transcript(self, text: str, confidence: Optional[float]) -> None:
        if text != self._echo and self._editor.toPlainText() != text:
            self._updating = True
            try:
                self._editor.setPlainText(text)
                self._editor.moveCursor(QTextCursor.MoveOperation.End)
            finally:
                self._updating = False
        if confidence is None:
            self._confidence_label.setText("")
        else:
            self._confidence_label.setText(f"Confidence: {round(confidence * 100)}%")
        self._refresh_buttons()

    def set_state(self, state: str) -> None:
        listening = state in (SessionState.LISTENING.value, SessionState.ACQUIRING_PERMISSION.value)
        self._toggle_button.setText("Stop Recording" if listening else "Start Recording")
        if state == SessionState.LISTENING.value:
            self._status_label.setText("Listening...")
        elif state == SessionState.ACQUIRING_PERMISSION.value:
            self._status_label.setText("Waiting for microphone...")
        else:
            self._status_label.setText("")

    def show_error(self, message: str) -> None:
        self._error_label.setText(message)
        self._error_label.setVisible(bool(message))

    def show_unsupported(self, message: str) -> None:
        self.show_error(message)
        for widget in (self._language_box, self._toggle_button, self._editor):
            widget.setEnabled(False)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_text_changed(self) -> None:
        if self._updating:
            return
        text = self._editor.toPlainText()
        self._echo = edit_echo(text)
        try:
            self._on_edit(text)
        finally:
            self._echo = None
        self._refresh_buttons()

    def _copy(self) -> None:
        self._flash(self._copy_button, "Copied!" if self._on_copy() else "Copy failed", "Copy")

    def _download(self) -> None:
        self._flash(self._download_button, "Downloaded!" if self._on_download() else "Download failed", "Download")

    def _flash(self, button: QPushButton, text: str, restore: str) -> None:
        button.setText(text)
        QTimer.singleShot(FEEDBACK_MS, lambda: button.setText(restore))

    def _refresh_buttons(self) -> None:
        has_text = bool(self._editor.toPlainText().strip())
        for button in (self._clear_button, self._copy_button, self._download_button):
            button.setEnabled(has_text)
