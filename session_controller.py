"""State-machine based session orchestration."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from errors import classify_error, unsupported_error
from event_channel import EventChannel
from interfaces import PermissionProvider, Recognizer, RecognizerFactory
from languages import DEFAULT_LANGUAGE, find_language
from logger import get_logger
from models import Language, RecognitionEvent, RecognitionKind, SessionError, SessionState

StateCallback = Callable[[SessionState, SessionState], None]
ErrorCallback = Callable[[str, str], None]
AvailabilityProbe = Callable[[], bool]

logger = get_logger(__name__)

_STARTABLE = (SessionState.IDLE, SessionState.STOPPED, SessionState.FAILED)
_STOPPABLE = (SessionState.LISTENING, SessionState.ACQUIRING_PERMISSION)


class SessionController:
    """Owns the one recognizer binding and the lifecycle of its sessions.

    Every event a binding reports is first applied to the controller's own
    state and then republished on ``channel``, so observers see events in the
    order the controller accepted them. Events from a binding that has since
    been released are dropped.
    """

    def __init__(
        self,
        recognizer_factory: RecognizerFactory,
        permission_provider: PermissionProvider,
        channel: Optional[EventChannel] = None,
        language: Language = DEFAULT_LANGUAGE,
        availability_probe: Optional[AvailabilityProbe] = None,
        on_state_change: Optional[StateCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._recognizer_factory = recognizer_factory
        self._permission_provider = permission_provider
        self.channel = channel or EventChannel()
        self._availability_probe = availability_probe
        self._on_state_change = on_state_change
        self._on_error = on_error

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._supported: Optional[bool] = None
        self._error: Optional[SessionError] = None

        self._language = language
        self._binding: Optional[Recognizer] = None
        self._binding_language: Optional[Language] = None
        self._binding_active = False
        self._generation = 0
        self._stop_requested = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def language(self) -> Language:
        return self._language

    @property
    def error(self) -> Optional[SessionError]:
        return self._error

    @property
    def supported(self) -> bool:
        return self.check_availability()

    @property
    def diagnostic(self) -> str:
        if self._supported is False:
            return unsupported_error().message
        return ""

    def check_availability(self) -> bool:
        """Probe for the recognition capability, once per controller."""
        with self._lock:
            if self._supported is None:
                try:
                    self._supported = bool(self._availability_probe()) if self._availability_probe else True
                except Exception as exc:
                    logger.warning("Availability probe failed: %s", exc)
                    self._supported = False
                if not self._supported:
                    self._error = unsupported_error()
                    logger.warning("Speech recognition unavailable; controller disabled")
            return self._supported

    def configure(self, language: Language | str) -> None:
        """Select the language for the next session.

        A live session keeps its language; the binding is rebuilt on the
        next ``start()`` if the language differs from the bound one.
        """
        if isinstance(language, str):
            language = find_language(language)
        with self._lock:
            if not self.check_availability():
                return
            if language == self._language:
                return
            self._language = language
            logger.info("Language set to %s for the next session", language.code)

    def start(self) -> None:
        with self._lock:
            if not self.check_availability():
                return
            if self._state not in _STARTABLE:
                return
            self._stop_requested = False
            self._error = None
            self._transition(SessionState.ACQUIRING_PERMISSION)
            generation = self._generation

        try:
            self._permission_provider.request_microphone(
                lambda granted: self._on_permission(generation, granted)
            )
        except Exception as exc:
            logger.warning("Permission request failed: %s", exc)
            self._on_permission(generation, False)

    def stop(self) -> None:
        with self._lock:
            if self._state not in _STOPPABLE:
                return
            self._stop_requested = True
            if self._binding is not None and self._binding_active:
                self._safe_stop_binding()

    def shutdown(self) -> None:
        """Release the binding, stopping it first if it is still capturing."""
        with self._lock:
            self._release_binding()
            # A permission grant that lands after shutdown must not start.
            self._generation += 1
            if self._state in _STOPPABLE:
                self._transition(SessionState.STOPPED)
                # The released binding's own ended event is dropped as stale.
                self.channel.publish(RecognitionEvent.ended())

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_permission(self, generation: int, granted: bool) -> None:
        with self._lock:
            if generation != self._generation or self._state != SessionState.ACQUIRING_PERMISSION:
                return
            if not granted:
                logger.info("Microphone permission denied")
                self._fail("permission-denied", "microphone access denied", publish=True)
                return
            if self._stop_requested:
                logger.info("Stop requested while waiting for permission; not starting")
                self._transition(SessionState.STOPPED)
                return

            try:
                binding = self._bind()
                self._binding_active = True
                binding.start(self._callback_for(self._generation))
            except Exception as exc:
                logger.exception("Recognizer start failed")
                self._binding_active = False
                self._fail("start-failed", str(exc), publish=True)

    def _bind(self) -> Recognizer:
        if self._binding is not None and self._binding_language == self._language:
            return self._binding
        self._release_binding()
        self._binding = self._recognizer_factory(self._language)
        self._binding_language = self._language
        logger.debug("Bound recognizer for %s (generation %d)", self._language.code, self._generation)
        return self._binding

    def _release_binding(self) -> None:
        binding = self._binding
        if binding is None:
            return
        try:
            if self._binding_active:
                self._safe_stop_binding()
        finally:
            self._binding = None
            self._binding_language = None
            self._binding_active = False
            # Late events from the released binding no longer match.
            self._generation += 1

    def _callback_for(self, generation: int) -> Callable[[RecognitionEvent], None]:
        def _on_event(event: RecognitionEvent) -> None:
            self._handle_recognition_event(generation, event)

        return _on_event

    def _handle_recognition_event(self, generation: int, event: RecognitionEvent) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping %s event from released binding", event.kind)
                return
            kind = event.kind
            if kind == RecognitionKind.STARTED.value:
                if self._state == SessionState.ACQUIRING_PERMISSION:
                    self._transition(SessionState.LISTENING)
            elif kind == RecognitionKind.ENDED.value:
                self._binding_active = False
                if self._state in _STOPPABLE:
                    self._transition(SessionState.STOPPED)
            elif kind == RecognitionKind.ERROR.value:
                self._binding_active = False
                self._fail(event.code, event.message, publish=False)
            self.channel.publish(event)

    def _fail(self, kind: str, detail: str, publish: bool) -> None:
        error = classify_error(kind, detail)
        self._error = error
        self._transition(SessionState.FAILED)
        logger.warning("Session failed: %s (%s)", error.code, detail or kind)
        if self._on_error:
            self._on_error(error.code, error.message)
        if publish:
            self.channel.publish(RecognitionEvent.error(kind, detail))

    def _safe_stop_binding(self) -> None:
        if self._binding is None:
            return
        try:
            self._binding.stop()
        except Exception as exc:  # pragma: no cover
            logger.warning("Recognizer stop failed: %s", exc)

    def _transition(self, to_state: SessionState) -> None:
        from_state = self._state
        if from_state == to_state:
            return
        self._state = to_state
        logger.debug("Session %s -> %s", from_state.value, to_state.value)
        if self._on_state_change:
            self._on_state_change(from_state, to_state)
