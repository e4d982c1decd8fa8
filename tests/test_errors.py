from __future__ import annotations

import pytest

from errors import (
    ERROR_MESSAGES,
    NO_SPEECH_DETECTED,
    PERMISSION_DENIED,
    UNKNOWN,
    UNSUPPORTED,
    classify_error,
    unsupported_error,
)
from languages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, find_language, primary_subtag


@pytest.mark.parametrize("kind", ["not-allowed", "permission-denied", "NOT-ALLOWED"])
def test_permission_kinds(kind: str) -> None:
    error = classify_error(kind, "whatever")
    assert error.code == PERMISSION_DENIED
    assert error.message == ERROR_MESSAGES[PERMISSION_DENIED]
    assert error.retryable is True


def test_no_speech_is_retryable() -> None:
    error = classify_error("no-speech")
    assert error.code == NO_SPEECH_DETECTED
    assert error.retryable is True


def test_unknown_surfaces_detail() -> None:
    error = classify_error("network", "socket closed")
    assert error.code == UNKNOWN
    assert error.message == "Speech recognition error: socket closed"
    assert error.retryable is False


def test_unknown_without_detail_uses_kind() -> None:
    assert classify_error("aborted").message == "Speech recognition error: aborted"


def test_unsupported_error() -> None:
    error = unsupported_error()
    assert error.code == UNSUPPORTED
    assert error.retryable is False


def test_language_catalog() -> None:
    codes = [language.code for language in SUPPORTED_LANGUAGES]
    assert len(codes) == 20
    assert len(set(codes)) == 20
    assert DEFAULT_LANGUAGE.code == "en-US"
    assert find_language("pt-br").name == "Portuguese (Brazil)"


def test_find_language_unknown() -> None:
    with pytest.raises(ValueError):
        find_language("tlh-KX")


def test_primary_subtag() -> None:
    assert primary_subtag("zh-CN") == "zh"
    assert primary_subtag("en") == "en"
