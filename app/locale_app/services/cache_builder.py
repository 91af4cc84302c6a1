"""Build the per-language locale cache files from the `locale` table.

Every (language, application) pair gets two files under
``{APPLICATION}_CACHE_PATH/locale/``:

* ``<language>.py``   - generated module of literal assignments, loaded with runpy
* ``<language>.json`` - the same groups as JSON, plus the ``loc`` calendar group

Both are derived data and can be rebuilt from the table at any time.
"""
from __future__ import annotations

import json
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app

from ..models import APPLICATIONS
from .calendar_labels import get_calendar_labels
from .locale_store import list_languages, list_types, query_entries
from .settings_store import get_active_languages

CODE_EXTENSION = 'py'
JSON_EXTENSION = 'json'
DEFAULT_MODULE = 'core'
LANGUAGE_PATTERN = re.compile(r'[a-z]{2}(-[a-z]{2,4})?')


class InvalidLanguageError(ValueError):
    """The language is not active on the site, or is not a language code."""

    def __init__(self, language: str):
        super().__init__(f"Invalid language ({language}).")
        self.language = language


def validate_language(language: str) -> str:
    """Return the language code, or raise InvalidLanguageError for anything else."""
    language = str(language)
    if not LANGUAGE_PATTERN.fullmatch(language):
        raise InvalidLanguageError(language)
    return language


def _cache_root(application: str) -> Path:
    if application not in APPLICATIONS:
        raise ValueError(f"Unknown application: {application}")
    return Path(current_app.config[f'{application.upper()}_CACHE_PATH']) / 'locale'


def cache_path(language: str, application: str, extension: str) -> Path:
    """Location of one cache artifact."""
    return _cache_root(application) / f'{validate_language(language)}.{extension}'


def _write_temp(path: Path, content: str) -> str:
    """Write `content` to a temp file next to `path` and return its name."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
    except BaseException:
        os.unlink(tmp_name)
        raise
    return tmp_name


def _write_together(files: List[Tuple[Path, str]]) -> None:
    """Write every file to a temp file first, then rename them all into place.

    If a rename fails, the files already renamed are removed so that
    `is_cache_built` reports the set as missing and it gets rebuilt.
    """
    pending: List[Tuple[str, Path]] = []
    try:
        for path, content in files:
            pending.append((_write_temp(path, content), path))

        replaced: List[Path] = []
        try:
            for tmp_name, path in pending:
                os.replace(tmp_name, path)
                replaced.append(path)
        except BaseException:
            for path in replaced:
                if path.exists():
                    path.unlink()
            raise
    finally:
        for tmp_name, _path in pending:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)


def _group_entries(entries: Iterable, types: Iterable[str], application: str) -> Tuple[Dict, List[str]]:
    """Group rows by type (and by module for the backend).

    Returns the groups and the code lines that rebuild them.
    """
    groups: Dict[str, Dict] = {}
    lines: List[str] = []
    entries = list(entries)

    for type_ in types:
        modules = [DEFAULT_MODULE]
        group: Dict = {}
        groups[type_] = group

        lines.append('')
        lines.append(f'{type_} = {{}}')
        if application == 'backend':
            group[DEFAULT_MODULE] = {}
            lines.append(f'{type_}[{DEFAULT_MODULE!r}] = {{}}')

        for entry in entries:
            if entry.type != type_:
                continue
            value = entry.value if entry.value is not None else ''

            if entry.module not in modules:
                modules.append(entry.module)
                if application == 'backend':
                    group[entry.module] = {}
                    lines.append(f'{type_}[{entry.module!r}] = {{}}')
                else:
                    lines.append(f'# module: {entry.module!r}')

            if application == 'backend':
                group[entry.module][entry.name] = value
                lines.append(f'{type_}[{entry.module!r}][{entry.name!r}] = {value!r}')
            else:
                group[entry.name] = value
                lines.append(f'{type_}[{entry.name!r}] = {value!r}')

    return groups, lines


def _render_code(language: str, application: str, types: Iterable[str], lines: List[str]) -> str:
    generated = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
    header = [
        '# This file is generated from the locale table and holds the',
        f'# {application} translations for {language!r}. Do NOT edit.',
        f'# generated: {generated}',
        '',
        f'TYPES = {tuple(types)!r}',
    ]
    return '\n'.join(header + lines) + '\n'


def build_cache(language: str, application: str) -> None:
    """Build the code cache and the JSON cache for a language/application."""
    language = validate_language(language)
    application = str(application)
    code_path = cache_path(language, application, CODE_EXTENSION)
    json_path = cache_path(language, application, JSON_EXTENSION)

    types = list_types()
    entries = query_entries(language, application)

    groups, lines = _group_entries(entries, types, application)
    code = _render_code(language, application, types, lines)

    payload = dict(groups)
    payload['loc'] = get_calendar_labels(language)

    _write_together([
        (code_path, code),
        (json_path, json.dumps(payload, ensure_ascii=False)),
    ])

    current_app.logger.info(
        f"Built {application} locale cache for {language}: {len(entries)} entries -> {code_path.parent}"
    )


def is_cache_built(language: str, application: str) -> bool:
    return (cache_path(language, application, CODE_EXTENSION).exists()
            and cache_path(language, application, JSON_EXTENSION).exists())


def ensure_cache_built(language: str, application: str) -> bool:
    """Build the cache when either artifact is missing. Returns True if it built."""
    if is_cache_built(language, application):
        return False
    build_cache(language, application)
    return True


def rebuild_all(application: str, languages: Optional[Iterable[str]] = None) -> List[str]:
    """Rebuild caches for the given languages, or for every known one."""
    if languages is None:
        fallback = current_app.config.get('LOCALE_FALLBACK_LANGUAGE', 'en')
        known = set(list_languages(application)) | set(get_active_languages()) | {fallback}
        languages = sorted(known)

    built = []
    for language in languages:
        build_cache(language, application)
        built.append(language)
    return built


def clear_cache(application: str, language: Optional[str] = None) -> int:
    """Delete cache files so they get rebuilt on next use. Returns files removed."""
    root = _cache_root(application)
    if not root.exists():
        return 0

    if language is None:
        targets = [path for path in root.iterdir()
                   if path.suffix in (f'.{CODE_EXTENSION}', f'.{JSON_EXTENSION}')]
    else:
        targets = [cache_path(language, application, CODE_EXTENSION),
                   cache_path(language, application, JSON_EXTENSION)]

    removed = 0
    for path in targets:
        if path.exists():
            path.unlink()
            removed += 1
    current_app.logger.info(f"Cleared {removed} {application} locale cache file(s)")
    return removed
