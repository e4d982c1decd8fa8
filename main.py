"""Application entrypoint."""

from __future__ import annotations

import sys

from config import JsonConfigStore
from errors import classify_error
from event_channel import EventChannel
from export import ClipboardExporter, FileExporter
from languages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, find_language
from logger import get_logger, setup_logging, shutdown_logging
from models import Language, RecognitionEvent, RecognitionKind, SessionState
from permissions import SoundDevicePermissionProvider
from recognizer import DashscopeRecognizer, recognizer_available
from session_controller import SessionController
from transcript import TranscriptReconciler
from window import MainWindow

try:
    from PySide6.QtCore import QObject, Signal
    from PySide6.QtWidgets import QApplication
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = get_logger(__name__)


class UIBridge(QObject):
    transcript_signal = Signal(str)
    error_signal = Signal(str)
    state_signal = Signal(str, str)  # from_state, to_state


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.config_store = JsonConfigStore()
        setup_logging(self.config_store.get_log_level())

        self.ui = UIBridge()
        self.ui.transcript_signal.connect(self._on_transcript_ui)
        self.ui.error_signal.connect(self._on_error_ui)
        self.ui.state_signal.connect(self._on_state_change_ui)

        try:
            language = find_language(self.config_store.get_language())
        except ValueError:
            language = DEFAULT_LANGUAGE

        self.channel = EventChannel()
        self.transcript = TranscriptReconciler(on_change=self._on_transcript)
        self.channel.subscribe(self.transcript.handle)
        self.channel.subscribe(self._on_event)

        self.controller = SessionController(
            recognizer_factory=self._make_recognizer,
            permission_provider=SoundDevicePermissionProvider(),
            channel=self.channel,
            language=language,
            availability_probe=recognizer_available,
            on_state_change=self._on_state_change,
        )
        self.clipboard = ClipboardExporter()
        self.downloads = FileExporter(self.config_store.get_export_dir())

        self.window = MainWindow(
            languages=SUPPORTED_LANGUAGES,
            current=language,
            on_language=self._set_language,
            on_toggle=self._toggle,
            on_clear=self.transcript.clear,
            on_edit=self._on_user_edit,
            on_copy=lambda: self.clipboard.export(self.transcript.text).success,
            on_download=lambda: self.downloads.export(self.transcript.text).success,
        )
        self.app.aboutToQuit.connect(self.quit)

    def _make_recognizer(self, language: Language) -> DashscopeRecognizer:
        return DashscopeRecognizer(
            language,
            api_key=self.config_store.get_api_key(),
            model=self.config_store.get_model(),
        )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def _toggle(self) -> None:
        if self.controller.state in (SessionState.LISTENING, SessionState.ACQUIRING_PERMISSION):
            self.controller.stop()
        else:
            self.controller.start()

    def _set_language(self, code: str) -> None:
        self.controller.configure(code)
        self.config_store.set_language(code)

    def _on_user_edit(self, text: str) -> None:
        self.transcript.edit(text)

    # ------------------------------------------------------------------
    # Callbacks (called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_transcript(self, text: str) -> None:
        self.ui.transcript_signal.emit(text)

    def _on_event(self, event: RecognitionEvent) -> None:
        if event.kind == RecognitionKind.STARTED.value:
            self.ui.error_signal.emit("")
        elif event.kind == RecognitionKind.ERROR.value:
            self.ui.error_signal.emit(classify_error(event.code, event.message).message)

    def _on_state_change(self, from_state: SessionState, to_state: SessionState) -> None:
        self.ui.state_signal.emit(from_state.value, to_state.value)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_transcript_ui(self, text: str) -> None:
        self.window.set_transcript(text, self.transcript.confidence)

    def _on_error_ui(self, msg: str) -> None:
        self.window.show_error(msg)

    def _on_state_change_ui(self, from_state: str, to_state: str) -> None:
        self.window.set_state(to_state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        if not self.controller.check_availability():
            self.window.show_unsupported(self.controller.diagnostic)
        else:
            self.channel.start()
        self.window.show()
        return self.app.exec()

    def quit(self) -> None:
        self.controller.shutdown()
        self.channel.close()
        shutdown_logging()


def main() -> int:
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
