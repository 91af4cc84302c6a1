"""Query interface over the `locale` table."""
from __future__ import annotations

from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..models import LocaleEntry, db, utcnow


class LocaleStoreError(RuntimeError):
    """Raised when the locale table cannot be read or written."""


def list_types() -> Tuple[str, ...]:
    """Return the possible values of `locale.type` as declared by the schema."""
    return tuple(LocaleEntry.__table__.c.type.type.enums)


def query_entries(language: str, application: str) -> List[LocaleEntry]:
    """Fetch every entry for a language/application, ordered by type, name, module."""
    try:
        return (
            LocaleEntry.query
            .filter_by(language=str(language), application=str(application))
            .order_by(LocaleEntry.type.asc(), LocaleEntry.name.asc(), LocaleEntry.module.asc())
            .all()
        )
    except SQLAlchemyError as e:
        current_app.logger.error(f"Failed to read locale for {language}/{application}: {e}")
        raise LocaleStoreError(f"Could not read locale for {language}/{application}.") from e


def list_languages(application: str) -> List[str]:
    """Distinct languages that have at least one entry for the application."""
    try:
        rows = (
            db.session.query(LocaleEntry.language)
            .filter_by(application=application)
            .distinct()
            .order_by(LocaleEntry.language)
            .all()
        )
    except SQLAlchemyError as e:
        current_app.logger.error(f"Failed to list locale languages for {application}: {e}")
        raise LocaleStoreError(f"Could not list languages for {application}.") from e
    return [row[0] for row in rows]


def save_entry(
    language: str,
    application: str,
    type: str,
    name: str,
    value: str,
    module: str = 'core',
    user_id: Optional[int] = None,
) -> LocaleEntry:
    """Insert or update a single entry. Caches are left untouched."""
    if type not in list_types():
        raise ValueError(f"Unknown locale type: {type}")

    try:
        entry = LocaleEntry.query.filter_by(
            language=language,
            application=application,
            module=module,
            type=type,
            name=name,
        ).first()
        if entry is None:
            entry = LocaleEntry(
                language=language,
                application=application,
                module=module,
                type=type,
                name=name,
            )
            db.session.add(entry)
        entry.value = value
        entry.user_id = user_id
        entry.edited_on = utcnow()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to save locale {language}/{application}/{module}/{type}{name}: {e}")
        raise LocaleStoreError(f"Could not save locale entry {type}{name}.") from e
    return entry
