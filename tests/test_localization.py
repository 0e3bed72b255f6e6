import importlib
import json
from importlib import resources
from types import ModuleType
from typing import Any

import pytest

import maze_horde.localization as localization_module


@pytest.fixture()
def localization() -> ModuleType:
    """Reload localization module to reset cached state between tests."""
    return importlib.reload(localization_module)


def test_language_options_include_metadata(localization: object) -> None:
    options = localization.language_options()

    assert options[0].code == "en"
    assert any(opt.code == "ja" and opt.name == "日本語" for opt in options)


def test_unknown_language_falls_back_to_english(localization: object) -> None:
    assert localization.set_language("xx") == "en"
    assert localization.set_language(None) == "en"
    assert localization.get_language() == "en"


def test_translate_qualifies_key_and_interpolates(localization: object) -> None:
    localization.set_language("en")

    assert localization.translate("darkness_start") == "Darkness falls! Visibility reduced!"
    assert localization.translate("events.bonus_time", seconds=10) == "Bonus time! +10 seconds!"
    assert localization.translate("does_not_exist") == "does_not_exist"


def test_translate_japanese(localization: object) -> None:
    localization.set_language("ja")

    assert localization.translate("events.darkness_end") == "光が戻った！"


def test_translating_notifier_collects_text(localization: object) -> None:
    localization.set_language("en")
    lines: list[str] = []
    notifier = localization.TranslatingNotifier(sink=lines.append)

    notifier.notify("events.level_complete", level=3)

    assert lines == ["Level 3 complete!"]
    assert notifier.history == lines


def _load_locale_payload(code: str) -> dict[str, Any]:
    locale_dir = resources.files("maze_horde").joinpath("locales")
    entry = locale_dir.joinpath(f"events.{code}.json")
    with resources.as_file(entry) as path:
        payload = json.loads(path.read_text(encoding="utf-8"))
    data = payload.get(code)
    if not isinstance(data, dict):
        raise AssertionError(f"Locale '{code}' missing top-level '{code}' entry")
    return data


def test_locale_files_share_the_english_keys() -> None:
    english = _load_locale_payload("en")
    locale_dir = resources.files("maze_horde").joinpath("locales")
    for entry in locale_dir.iterdir():
        name = entry.name
        if not name.startswith("events.") or not name.endswith(".json"):
            continue
        code = name[len("events.") : -len(".json")]
        payload = _load_locale_payload(code)
        assert set(payload) == set(english), code
        assert set(payload["meta"]) == set(english["meta"]), code
