"""Module settings (site configuration stored in the database)."""
from __future__ import annotations

from typing import Any, List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..models import ModuleSetting, db


def get_module_setting(module: str, key: str, default: Any = None) -> Any:
    """Return a module setting, or `default` when it is not stored."""
    setting = db.session.get(ModuleSetting, (module, key))
    if setting is None or setting.value is None:
        return default
    return setting.value


def set_module_setting(module: str, key: str, value: Any) -> None:
    """Store (or overwrite) a module setting."""
    try:
        setting = db.session.get(ModuleSetting, (module, key))
        if setting is None:
            setting = ModuleSetting(module=module, name=key)
            db.session.add(setting)
        setting.value = value
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to store setting {module}.{key}: {e}")
        raise


def get_default_language() -> str:
    """The language used when nothing better is known."""
    return str(get_module_setting('core', 'default_language',
                                  current_app.config['SITE_DEFAULT_LANGUAGE']))


def _language_list(key: str) -> List[str]:
    languages = get_module_setting('core', key)
    if not languages:
        return [get_default_language()]
    if isinstance(languages, str):
        languages = [languages]
    return [str(language) for language in languages]


def get_active_languages() -> List[str]:
    """Languages enabled on the site."""
    return _language_list('active_languages')


def get_redirect_languages() -> List[str]:
    """Languages a visitor may be redirected to based on their browser."""
    return _language_list('redirect_languages')
