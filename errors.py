"""Shared error codes and user-facing messages."""

from __future__ import annotations

from models import SessionError

UNSUPPORTED = "UNSUPPORTED"
PERMISSION_DENIED = "PERMISSION_DENIED"
NO_SPEECH_DETECTED = "NO_SPEECH_DETECTED"
UNKNOWN = "UNKNOWN"
EXPORT_FAILED = "EXPORT_FAILED"

ERROR_MESSAGES = {
    UNSUPPORTED: (
        "Speech recognition is not available on this system. "
        "Install the speech service SDK and connect a microphone."
    ),
    PERMISSION_DENIED: "Microphone access denied. Please allow microphone access and try again.",
    NO_SPEECH_DETECTED: "No speech detected. Please try speaking again.",
    UNKNOWN: "Speech recognition error: {detail}",
    EXPORT_FAILED: "Export failed: {detail}",
}

# Recognizer-reported kinds that mean the microphone was refused.
_PERMISSION_KINDS = {"not-allowed", "permission-denied"}
_NO_SPEECH_KINDS = {"no-speech"}


def classify_error(kind: str, detail: str = "") -> SessionError:
    """Map a recognizer-reported error kind to a user-facing error."""
    normalized = (kind or "").strip().lower()
    if normalized in _PERMISSION_KINDS:
        return SessionError(PERMISSION_DENIED, ERROR_MESSAGES[PERMISSION_DENIED], retryable=True)
    if normalized in _NO_SPEECH_KINDS:
        return SessionError(NO_SPEECH_DETECTED, ERROR_MESSAGES[NO_SPEECH_DETECTED], retryable=True)
    return SessionError(
        UNKNOWN,
        ERROR_MESSAGES[UNKNOWN].format(detail=detail or kind or "unknown"),
        retryable=False,
    )


def unsupported_error() -> SessionError:
    return SessionError(UNSUPPORTED, ERROR_MESSAGES[UNSUPPORTED], retryable=False)
