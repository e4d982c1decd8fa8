"""Simple JSON-based config store."""

from __future__ import annotations

import json
from pathlib import Path

DEFAULT_LANGUAGE_CODE = "en-US"
DEFAULT_MODEL = "paraformer-realtime-v2"
DEFAULT_LOG_LEVEL = "INFO"


def _default_export_dir() -> Path:
    downloads = Path.home() / "Downloads"
    return downloads if downloads.is_dir() else Path.home()


class JsonConfigStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "live_dictation" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_language(self) -> str:
        return str(self._read_all().get("language", DEFAULT_LANGUAGE_CODE))

    def set_language(self, code: str) -> None:
        self._set("language", code)

    def get_api_key(self) -> str:
        return str(self._read_all().get("api_key", ""))

    def set_api_key(self, key: str) -> None:
        self._set("api_key", key)

    def get_model(self) -> str:
        return str(self._read_all().get("model", DEFAULT_MODEL))

    def set_model(self, model: str) -> None:
        self._set("model", model)

    def get_export_dir(self) -> Path:
        value = self._read_all().get("export_dir")
        return Path(value).expanduser() if value else _default_export_dir()

    def set_export_dir(self, path: Path) -> None:
        self._set("export_dir", str(path))

    def get_log_level(self) -> str:
        return str(self._read_all().get("log_level", DEFAULT_LOG_LEVEL)).upper()

    def _set(self, key: str, value: object) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
