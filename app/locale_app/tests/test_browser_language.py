import pytest

from app.locale_app.services.browser_language import get_browser_language, parse_accept_language


def test_parse_orders_by_weight():
    assert parse_accept_language("fr;q=0.8,en;q=0.9,nl") == [
        ("nl", 1.0),
        ("en", 0.9),
        ("fr", 0.8),
    ]


def test_parse_truncates_to_primary_subtag():
    assert parse_accept_language("en-US,en;q=0.5") == [("en", 1.0), ("en", 0.5)]
    assert parse_accept_language("NL-be") == [("nl", 1.0)]


def test_parse_ties_keep_header_order():
    assert parse_accept_language("de;q=0.5,fr;q=0.7,en;q=0.5,nl;q=0.7") == [
        ("fr", 0.7),
        ("nl", 0.7),
        ("de", 0.5),
        ("en", 0.5),
    ]


def test_parse_malformed_weight_defaults_to_one():
    assert parse_accept_language("fr;q=abc,en;q=0.9") == [("fr", 1.0), ("en", 0.9)]


def test_parse_weight_stops_at_next_parameter():
    assert parse_accept_language("fr;q=0.3;level=1,en;q=0.2") == [("fr", 0.3), ("en", 0.2)]


@pytest.mark.parametrize("header", [None, "", " , ,"])
def test_parse_empty(header):
    assert parse_accept_language(header) == []


def test_highest_weighted_redirect_language_wins(languages):
    assert get_browser_language(True, header="fr;q=0.8,en;q=0.9") == "en"


def test_skips_languages_outside_redirect_set(languages):
    assert get_browser_language(header="nl,fr;q=0.9,de;q=0.2") == "de"


@pytest.mark.parametrize("header", ["", "e"])
def test_missing_or_short_header_returns_default(languages, header):
    assert get_browser_language(header=header) == "en"


def test_no_match_returns_default(languages):
    assert get_browser_language(header="ja,zh;q=0.5") == "en"


def test_not_for_redirect_uses_active_languages(languages):
    assert get_browser_language(for_redirect=False, header="nl,de;q=0.9") == "nl"
    assert get_browser_language(for_redirect=True, header="nl,de;q=0.9") == "de"


def test_reads_header_from_request(app_context, languages):
    with app_context.test_request_context("/", headers={"Accept-Language": "de-DE,de;q=0.9,en;q=0.8"}):
        assert get_browser_language() == "de"


def test_request_without_header_returns_default(app_context, languages):
    with app_context.test_request_context("/"):
        assert get_browser_language() == "en"


def test_default_language_setting(languages):
    from app.locale_app.services.settings_store import set_module_setting

    set_module_setting("core", "default_language", "nl")

    assert get_browser_language(header="ja") == "nl"
