from __future__ import annotations

from pathlib import Path

from config import JsonConfigStore


def test_config_read_write(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    store = JsonConfigStore(path=path)

    assert store.get_language() == "en-US"
    assert store.get_api_key() == ""
    assert store.get_model() == "paraformer-realtime-v2"
    assert store.get_log_level() == "INFO"

    store.set_language("fr-FR")
    store.set_api_key("abc")
    store.set_export_dir(tmp_path / "exports")

    reloaded = JsonConfigStore(path=path)
    assert reloaded.get_language() == "fr-FR"
    assert reloaded.get_api_key() == "abc"
    assert reloaded.get_export_dir() == tmp_path / "exports"


def test_config_invalid_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{invalid", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_api_key() == ""
    assert store.get_language() == "en-US"


def test_config_non_object_json_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    store = JsonConfigStore(path=path)
    assert store.get_language() == "en-US"
    store.set_model("paraformer-realtime-8k-v2")
    assert store.get_model() == "paraformer-realtime-8k-v2"
