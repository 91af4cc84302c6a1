import json
from pathlib import Path

import pytest

from app.locale_app.services import cache_builder
from app.locale_app.services.cache_builder import (
    InvalidLanguageError,
    build_cache,
    cache_path,
    clear_cache,
    ensure_cache_built,
    rebuild_all,
)
from app.locale_app.services.locale_loader import load_code_cache, load_json_cache
from app.locale_app.services.locale_store import LocaleStoreError, list_types, save_entry


def test_build_writes_code_and_json_cache(entries):
    build_cache("en", "frontend")

    assert cache_path("en", "frontend", "py").exists()
    assert cache_path("en", "frontend", "json").exists()
    assert cache_path("en", "frontend", "py").parent.name == "locale"


def test_code_and_json_cache_hold_the_same_entries(entries):
    save_entry("nl", "frontend", "msg", "Quote", "it's \"quoted\"\nand {braced}")
    build_cache("nl", "frontend")

    code = load_code_cache("nl", "frontend")
    payload = load_json_cache("nl", "frontend")

    for type_ in list_types():
        assert code[type_] == payload[type_]
    assert code["msg"]["Quote"] == "it's \"quoted\"\nand {braced}"
    assert code["lbl"] == {"OnlyDutch": "alleen nederlands", "Search": "zoeken"}


def test_every_type_gets_a_group_even_without_rows():
    build_cache("en", "frontend")

    payload = load_json_cache("en", "frontend")
    code = load_code_cache("en", "frontend")
    for type_ in ("act", "err", "lbl", "msg"):
        assert payload[type_] == {}
        assert code[type_] == {}


def test_frontend_flattens_modules_last_module_wins():
    save_entry("en", "frontend", "lbl", "Title", "blog title", module="blog")
    save_entry("en", "frontend", "lbl", "Title", "core title", module="core")
    save_entry("en", "frontend", "lbl", "Comments", "comments", module="blog")

    build_cache("en", "frontend")

    labels = load_json_cache("en", "frontend")["lbl"]
    # rows come ordered by type, name, module: "core" sorts after "blog"
    assert labels == {"Comments": "comments", "Title": "core title"}
    assert "# module: 'blog'" in cache_path("en", "frontend", "py").read_text(encoding="utf-8")


def test_backend_keeps_module_dimension():
    save_entry("en", "backend", "lbl", "Save", "save")
    save_entry("en", "backend", "lbl", "Save", "save page", module="pages")

    build_cache("en", "backend")

    payload = load_json_cache("en", "backend")
    assert payload["lbl"] == {"core": {"Save": "save"}, "pages": {"Save": "save page"}}
    assert load_code_cache("en", "backend")["lbl"] == payload["lbl"]


@pytest.mark.parametrize("language", ["en", "nl", "fr", "de"])
def test_calendar_labels_in_json_cache(language):
    build_cache(language, "frontend")

    loc = load_json_cache(language, "frontend")["loc"]
    for prefix in ("MonthLong", "MonthShort"):
        assert f"{prefix}January" in loc
        assert f"{prefix}December" in loc
    for prefix in ("DayLong", "DayShort"):
        assert f"{prefix}Sun" in loc
        assert f"{prefix}Sat" in loc
    assert len(loc) == 12 * 2 + 7 * 2


def test_calendar_labels_are_localized():
    build_cache("en", "frontend")
    build_cache("nl", "frontend")

    en = load_json_cache("en", "frontend")["loc"]
    nl = load_json_cache("nl", "frontend")["loc"]

    assert en["MonthLongJanuary"] == "January"
    assert en["DayLongSun"] == "Sunday"
    assert en["DayShortMon"] == "Mon"
    assert nl["MonthLongMarch"] == "maart"
    assert nl["DayLongSun"] == "zondag"
    assert list(en)[24:31] == [
        "DayLongSun", "DayLongMon", "DayLongTue", "DayLongWed",
        "DayLongThu", "DayLongFri", "DayLongSat",
    ]


def test_calendar_labels_not_in_code_cache(entries):
    build_cache("en", "frontend")

    assert "loc" not in load_code_cache("en", "frontend")
    assert "MonthLong" not in cache_path("en", "frontend", "py").read_text(encoding="utf-8")


def test_unknown_calendar_locale_falls_back_to_english():
    build_cache("xx", "frontend")

    assert load_json_cache("xx", "frontend")["loc"]["MonthLongMay"] == "May"


def test_store_failure_leaves_no_files(monkeypatch):
    def broken(language, application):
        raise LocaleStoreError("database is gone")

    monkeypatch.setattr(cache_builder, "query_entries", broken)

    with pytest.raises(LocaleStoreError):
        build_cache("en", "frontend")

    assert not cache_path("en", "frontend", "py").exists()
    assert not cache_path("en", "frontend", "json").exists()


def test_failed_write_leaves_no_temp_files(monkeypatch):
    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(cache_builder.os, "replace", fail_replace)

    with pytest.raises(OSError):
        build_cache("en", "frontend")

    directory = cache_path("en", "frontend", "py").parent
    assert list(directory.iterdir()) == []


def test_rebuild_leaves_no_temp_files(entries):
    build_cache("en", "frontend")
    build_cache("en", "frontend")

    directory = cache_path("en", "frontend", "py").parent
    assert sorted(path.name for path in directory.iterdir()) == ["en.json", "en.py"]


def test_rebuild_picks_up_changed_entries(entries):
    build_cache("en", "frontend")
    assert load_code_cache("en", "frontend")["lbl"]["Home"] == "home"

    save_entry("en", "frontend", "lbl", "Home", "start")
    build_cache("en", "frontend")

    assert load_code_cache("en", "frontend")["lbl"]["Home"] == "start"
    assert load_json_cache("en", "frontend")["lbl"]["Home"] == "start"


def test_ensure_cache_built_is_idempotent(entries):
    assert ensure_cache_built("en", "frontend") is True
    assert ensure_cache_built("en", "frontend") is False

    cache_path("en", "frontend", "json").unlink()
    assert ensure_cache_built("en", "frontend") is True


def test_clear_cache(entries):
    build_cache("en", "frontend")
    build_cache("nl", "frontend")

    assert clear_cache("frontend", "nl") == 2
    assert not cache_path("nl", "frontend", "py").exists()
    assert cache_path("en", "frontend", "py").exists()

    assert clear_cache("frontend") == 2
    assert clear_cache("frontend") == 0


def test_rebuild_all_covers_stored_and_active_languages(entries, languages):
    built = rebuild_all("frontend")

    assert built == ["en", "fr", "nl"]
    for language in built:
        assert cache_path(language, "frontend", "json").exists()


def test_unknown_application_is_rejected():
    with pytest.raises(ValueError):
        build_cache("en", "api")


def test_json_cache_is_utf8():
    save_entry("fr", "frontend", "lbl", "Summer", "été")
    build_cache("fr", "frontend")

    raw = Path(cache_path("fr", "frontend", "json")).read_text(encoding="utf-8")
    assert json.loads(raw)["lbl"]["Summer"] == "été"


@pytest.mark.parametrize("language", ["../../escaped", "en/../../x", "en\nX = 1", "EN", "e", "english", ""])
def test_bad_language_codes_never_reach_the_filesystem(tmp_path, language):
    with pytest.raises(InvalidLanguageError):
        build_cache(language, "frontend")
    with pytest.raises(InvalidLanguageError):
        cache_path(language, "frontend", "py")

    assert [path for path in tmp_path.rglob("*") if path.is_file()] == []


@pytest.mark.parametrize("language", ["en", "nl", "pt-br", "zh-hant"])
def test_language_codes_with_region_are_accepted(language):
    build_cache(language, "frontend")

    assert cache_path(language, "frontend", "json").exists()


def test_module_names_cannot_inject_code():
    save_entry("en", "frontend", "lbl", "Home", "home", module="blog\nlbl['Injected'] = 'code ran'")
    save_entry("en", "backend", "lbl", "Home", "home", module="blog\nlbl = {}")

    build_cache("en", "frontend")
    build_cache("en", "backend")

    assert load_code_cache("en", "frontend")["lbl"] == {"Home": "home"}
    assert load_code_cache("en", "frontend")["lbl"] == load_json_cache("en", "frontend")["lbl"]
    assert load_code_cache("en", "backend")["lbl"] == load_json_cache("en", "backend")["lbl"]


def test_failed_json_write_does_not_leave_a_half_built_pair(entries, monkeypatch):
    build_cache("en", "frontend")
    save_entry("en", "frontend", "lbl", "Home", "start")

    real_replace = cache_builder.os.replace

    def fail_for_json(src, dst):
        if str(dst).endswith(".json"):
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(cache_builder.os, "replace", fail_for_json)
    with pytest.raises(OSError):
        build_cache("en", "frontend")
    monkeypatch.undo()

    directory = cache_path("en", "frontend", "py").parent
    assert sorted(path.name for path in directory.iterdir()) == ["en.json"]

    assert ensure_cache_built("en", "frontend") is True
    assert load_code_cache("en", "frontend")["lbl"]["Home"] == "start"
    assert load_json_cache("en", "frontend")["lbl"]["Home"] == "start"
