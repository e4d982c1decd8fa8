"""Locales the recognizer can be configured with."""

from __future__ import annotations

from models import Language

SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("en-US", "English (US)"),
    Language("en-GB", "English (UK)"),
    Language("es-ES", "Spanish (Spain)"),
    Language("es-MX", "Spanish (Mexico)"),
    Language("fr-FR", "French (France)"),
    Language("de-DE", "German (Germany)"),
    Language("it-IT", "Italian (Italy)"),
    Language("pt-BR", "Portuguese (Brazil)"),
    Language("ru-RU", "Russian"),
    Language("ja-JP", "Japanese"),
    Language("ko-KR", "Korean"),
    Language("zh-CN", "Chinese (Mandarin)"),
    Language("hi-IN", "Hindi (India)"),
    Language("ar-SA", "Arabic (Saudi Arabia)"),
    Language("nl-NL", "Dutch (Netherlands)"),
    Language("sv-SE", "Swedish (Sweden)"),
    Language("da-DK", "Danish (Denmark)"),
    Language("no-NO", "Norwegian (Norway)"),
    Language("fi-FI", "Finnish (Finland)"),
    Language("pl-PL", "Polish (Poland)"),
)

DEFAULT_LANGUAGE = SUPPORTED_LANGUAGES[0]


def find_language(code: str) -> Language:
    """Return the catalog entry for ``code``; raise ValueError if unknown."""
    for language in SUPPORTED_LANGUAGES:
        if language.code.lower() == (code or "").lower():
            return language
    raise ValueError(f"unsupported language: {code!r}")


def primary_subtag(code: str) -> str:
    """``"pt-BR"`` -> ``"pt"``."""
    return code.split("-", 1)[0].lower()
