"""python-i18n wrapper that turns notification keys into display text."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Callable

import i18n

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
NAMESPACE = "events"


@dataclass(frozen=True)
class LanguageOption:
    code: str
    name: str


_LANGUAGE_OPTIONS: tuple[LanguageOption, ...] | None = None
_CURRENT_LANGUAGE = DEFAULT_LANGUAGE
_CONFIGURED = False


def _configure_backend() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    base_path = resources.files("maze_horde").joinpath("locales")
    load_path = str(base_path)
    if load_path not in i18n.load_path:
        i18n.load_path.append(load_path)
    i18n.set("filename_format", "{namespace}.{locale}.{format}")
    i18n.set("file_format", "json")
    i18n.set("fallback", DEFAULT_LANGUAGE)
    i18n.set("error_on_missing_translation", False)
    i18n.set("enable_memoization", True)
    _CONFIGURED = True


def _get_language_options() -> tuple[LanguageOption, ...]:
    global _LANGUAGE_OPTIONS
    if _LANGUAGE_OPTIONS is not None:
        return _LANGUAGE_OPTIONS

    base = resources.files("maze_horde").joinpath("locales")
    prefix = f"{NAMESPACE}."
    options: list[LanguageOption] = []
    for entry in base.iterdir():
        name = entry.name
        if not name.startswith(prefix) or not name.endswith(".json"):
            continue
        code = name[len(prefix) : -len(".json")]
        try:
            data = json.loads(entry.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Skipping unreadable locale file %s: %s", name, exc)
            continue
        locale_data = data.get(code, {}) if isinstance(data, dict) else {}
        meta = locale_data.get("meta", {}) if isinstance(locale_data, dict) else {}
        options.append(LanguageOption(code=code, name=meta.get("language_name") or code))

    if not options:
        options.append(LanguageOption(code=DEFAULT_LANGUAGE, name="English"))
    options.sort(key=lambda opt: (0 if opt.code == DEFAULT_LANGUAGE else 1, opt.code))
    _LANGUAGE_OPTIONS = tuple(options)
    return _LANGUAGE_OPTIONS


def language_options() -> tuple[LanguageOption, ...]:
    return _get_language_options()


def _normalize_language(code: str | None) -> str:
    if code:
        for option in _get_language_options():
            if option.code == code:
                return option.code
    return DEFAULT_LANGUAGE


def set_language(code: str | None) -> str:
    """Configure the active language, returning the resolved code."""
    global _CURRENT_LANGUAGE
    _configure_backend()
    resolved = _normalize_language(code)
    i18n.set("locale", resolved)
    _CURRENT_LANGUAGE = resolved
    return resolved


def get_language() -> str:
    return _CURRENT_LANGUAGE


def translate(key: str, **kwargs: Any) -> str:
    if not _CONFIGURED:
        set_language(_CURRENT_LANGUAGE)
    qualified_key = key if key.startswith(f"{NAMESPACE}.") else f"{NAMESPACE}.{key}"
    return i18n.t(qualified_key, default=key, **kwargs)


def _log_text(text: str) -> None:
    logger.info("%s", text)


@dataclass
class TranslatingNotifier:
    """Notifier that renders each key and hands the text to ``sink``."""

    sink: Callable[[str], None] = _log_text
    history: list[str] = field(default_factory=list)

    def notify(self, key: str, **params: Any) -> None:
        text = translate(key, **params)
        self.history.append(text)
        self.sink(text)


__all__ = [
    "DEFAULT_LANGUAGE",
    "LanguageOption",
    "language_options",
    "set_language",
    "get_language",
    "translate",
    "TranslatingNotifier",
]
