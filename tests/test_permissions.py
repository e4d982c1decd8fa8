from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import permissions
from permissions import SoundDevicePermissionProvider


@patch("permissions.sd")
def test_grant_when_stream_opens(mock_sd: MagicMock) -> None:
    results: list[bool] = []

    SoundDevicePermissionProvider(threaded=False).request_microphone(results.append)

    assert results == [True]
    stream = mock_sd.InputStream.return_value
    stream.start.assert_called_once()
    stream.close.assert_called_once()


@patch("permissions.sd")
def test_deny_when_device_refuses(mock_sd: MagicMock) -> None:
    mock_sd.check_input_settings.side_effect = Exception("Error querying device -1")
    results: list[bool] = []

    SoundDevicePermissionProvider(threaded=False).request_microphone(results.append)

    assert results == [False]
    mock_sd.InputStream.assert_not_called()


def test_deny_without_sounddevice(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr(permissions, "sd", None)
    results: list[bool] = []

    SoundDevicePermissionProvider(threaded=False).request_microphone(results.append)

    assert results == [False]


@patch("permissions.sd")
def test_threaded_request_answers_later(mock_sd: MagicMock) -> None:
    answered = threading.Event()
    results: list[bool] = []

    def on_result(granted: bool) -> None:
        results.append(granted)
        answered.set()

    SoundDevicePermissionProvider().request_microphone(on_result)

    assert answered.wait(timeout=2.0)
    assert results == [True]
