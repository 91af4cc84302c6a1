import os

import pytest

os.environ.setdefault("FLASK_ENV", "testing")

from app.locale_app.app import create_app
from app.locale_app.models import db
from app.locale_app.services.locale_store import save_entry
from app.locale_app.services.settings_store import set_module_setting


@pytest.fixture(autouse=True)
def app_context(tmp_path):
    app = create_app("testing")
    app.config.update(
        FRONTEND_CACHE_PATH=str(tmp_path / "frontend"),
        BACKEND_CACHE_PATH=str(tmp_path / "backend"),
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def languages():
    set_module_setting("core", "default_language", "en")
    set_module_setting("core", "active_languages", ["en", "nl", "fr"])
    set_module_setting("core", "redirect_languages", ["en", "de"])


@pytest.fixture
def entries():
    rows = [
        ("en", "act", "Archive", "archive"),
        ("en", "err", "FieldIsRequired", "This field is required."),
        ("en", "lbl", "Home", "home"),
        ("en", "lbl", "Search", "search"),
        ("en", "msg", "WrittenBy", "written by %1$s"),
        ("nl", "act", "Archive", "archief"),
        ("nl", "lbl", "Search", "zoeken"),
        ("nl", "lbl", "OnlyDutch", "alleen nederlands"),
    ]
    for language, type_, name, value in rows:
        save_entry(language, "frontend", type_, name, value)
    return rows
