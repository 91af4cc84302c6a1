"""Loader for the generated locale cache files."""
from __future__ import annotations

import json
import runpy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from .cache_builder import CODE_EXTENSION, JSON_EXTENSION, cache_path
from .locale_store import list_types


@lru_cache(maxsize=128)
def _run_code_cache(path: str, stamp: tuple) -> Dict[str, Any]:
    namespace = runpy.run_path(path)
    types = namespace.get('TYPES', ())
    return {type_: dict(namespace.get(type_) or {}) for type_ in types}


@lru_cache(maxsize=128)
def _read_json_cache(path: str, stamp: tuple) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as handle:
        payload = json.load(handle)
    return payload if isinstance(payload, dict) else {}


def _stamp(path: Path) -> tuple:
    # Rebuilt files are renamed into place as new inodes.
    stat = path.stat()
    return (stat.st_ino, stat.st_mtime_ns, stat.st_size)


def load_code_cache(language: str, application: str) -> Dict[str, Dict[str, Any]]:
    """Load the code cache, e.g. {'lbl': {'Name': 'value'}, ...}."""
    path = cache_path(language, application, CODE_EXTENSION)
    groups = _run_code_cache(str(path), _stamp(path))
    return {type_: dict(groups.get(type_, {})) for type_ in list_types()}


def load_json_cache(language: str, application: str) -> Dict[str, Any]:
    """Load the JSON cache (entry groups plus `loc`)."""
    path = cache_path(language, application, JSON_EXTENSION)
    return dict(_read_json_cache(str(path), _stamp(path)))
