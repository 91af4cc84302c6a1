"""Translations for the frontend.

`set_locale` resolves a language, makes sure its cache exists and returns an
immutable `LocaleContext` holding the translations merged over English. The
context is kept on `flask.g` for the current request; nothing is shared
between requests.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from flask import current_app, g, has_app_context

from ..utils import to_camel_case
from .cache_builder import InvalidLanguageError, ensure_cache_built, validate_language
from .locale_loader import load_code_cache
from .settings_store import get_active_languages, get_default_language, get_redirect_languages

APPLICATION = 'frontend'

__all__ = [
    'Found',
    'InvalidLanguageError',
    'LocaleContext',
    'Missing',
    'get_action',
    'get_active_languages',
    'get_error',
    'get_label',
    'get_locale',
    'get_message',
    'get_redirect_languages',
    'set_locale',
]


@dataclass(frozen=True)
class Found:
    value: str

    found = True

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class Missing:
    placeholder: str

    found = False

    @property
    def text(self) -> str:
        return self.placeholder


LookupResult = Union[Found, Missing]


def _freeze(mapping: Dict[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class LocaleContext:
    """The translations of one language, with English filled in where missing."""

    language: str
    actions: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    errors: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    labels: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    messages: Mapping[str, str] = field(default_factory=lambda: _freeze({}))

    def _group(self, type_: str) -> Mapping[str, str]:
        groups = {
            'act': self.actions,
            'err': self.errors,
            'lbl': self.labels,
            'msg': self.messages,
        }
        if type_ not in groups:
            raise ValueError(f"Unknown locale type: {type_}")
        return groups[type_]

    def lookup(self, type_: str, key: str) -> LookupResult:
        """Find a translation; a miss carries the `{$<type><Key>}` placeholder."""
        key = to_camel_case(str(key))
        group = self._group(type_)
        if key in group:
            return Found(group[key])
        return Missing('{$' + type_ + key + '}')

    def get_action(self, key: str) -> str:
        return self.lookup('act', key).text

    def get_error(self, key: str) -> str:
        return self.lookup('err', key).text

    def get_label(self, key: str) -> str:
        return self.lookup('lbl', key).text

    def get_message(self, key: str) -> str:
        return self.lookup('msg', key).text

    # short names for templates
    act = get_action
    err = get_error
    lbl = get_label
    msg = get_message

    def get_actions(self) -> Mapping[str, str]:
        return self.actions

    def get_errors(self) -> Mapping[str, str]:
        return self.errors

    def get_labels(self) -> Mapping[str, str]:
        return self.labels

    def get_messages(self) -> Mapping[str, str]:
        return self.messages


def _current_language() -> str:
    language = g.get('language') if has_app_context() else None
    return str(language) if language else get_default_language()


def set_locale(language: Optional[str] = None, force: bool = False) -> LocaleContext:
    """Load the translations for a language and make them current.

    Args:
        language: language code; defaults to the language of the request
        force: skip the active-language check

    Raises:
        InvalidLanguageError: the language is not a language code, or is not
            active and force is False
        LocaleStoreError: a missing cache could not be built
    """
    language = str(language) if language is not None else _current_language()

    if not force and language not in get_active_languages():
        raise InvalidLanguageError(language)
    validate_language(language)

    fallback = current_app.config.get('LOCALE_FALLBACK_LANGUAGE', 'en')
    ensure_cache_built(fallback, APPLICATION)
    ensure_cache_built(language, APPLICATION)

    # English first, the requested language overrides it key by key
    merged = {type_: dict(group) for type_, group in load_code_cache(fallback, APPLICATION).items()}
    if language != fallback:
        for type_, group in load_code_cache(language, APPLICATION).items():
            merged.setdefault(type_, {}).update(group)

    context = LocaleContext(
        language=language,
        actions=_freeze(merged.get('act', {})),
        errors=_freeze(merged.get('err', {})),
        labels=_freeze(merged.get('lbl', {})),
        messages=_freeze(merged.get('msg', {})),
    )
    g.locale = context
    current_app.logger.debug(f"Locale set to {language}")
    return context


def get_locale() -> LocaleContext:
    """The context of the current request (empty until set_locale is called)."""
    context = g.get('locale')
    if context is None:
        return LocaleContext(language=_current_language())
    return context


def get_action(key: str) -> str:
    return get_locale().get_action(key)


def get_error(key: str) -> str:
    return get_locale().get_error(key)


def get_label(key: str) -> str:
    return get_locale().get_label(key)


def get_message(key: str) -> str:
    return get_locale().get_message(key)
