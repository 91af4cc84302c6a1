"""SQLAlchemy database models for the locale store."""
from datetime import datetime, timezone
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()

APPLICATIONS = ('backend', 'frontend')
LOCALE_TYPES = ('act', 'err', 'lbl', 'msg')


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite connections for better concurrency."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=15000;")
        cursor.close()


def utcnow():
    """Get current UTC time."""
    return datetime.now(timezone.utc)


class LocaleEntry(db.Model):
    """One translatable string."""
    __tablename__ = 'locale'
    __table_args__ = (
        db.UniqueConstraint('language', 'application', 'module', 'type', 'name', name='uq_locale_entry'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True)
    language = db.Column(db.String(5), index=True, nullable=False)
    application = db.Column(db.Enum(*APPLICATIONS, name='locale_application'), nullable=False)
    module = db.Column(db.String(255), nullable=False, default='core')
    type = db.Column(db.Enum(*LOCALE_TYPES, name='locale_type'), nullable=False, default='lbl')
    name = db.Column(db.String(255), nullable=False)
    value = db.Column(db.Text, nullable=True)
    edited_on = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f'<LocaleEntry {self.language}/{self.application}/{self.module}/{self.type}{self.name}>'

    def to_dict(self):
        """Convert entry to dictionary."""
        return {
            'id': self.id,
            'language': self.language,
            'application': self.application,
            'module': self.module,
            'type': self.type,
            'name': self.name,
            'value': self.value,
        }


class ModuleSetting(db.Model):
    """A per-module configuration value (e.g. core.active_languages)."""
    __tablename__ = 'modules_settings'

    module = db.Column(db.String(255), primary_key=True)
    name = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.JSON, nullable=True)

    def __repr__(self):
        return f'<ModuleSetting {self.module}.{self.name}>'
