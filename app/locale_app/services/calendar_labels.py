"""Localized month and weekday names for the `loc` group of the JSON cache."""
from __future__ import annotations

from typing import Dict

from babel import Locale, UnknownLocaleError
from babel.dates import get_day_names, get_month_names
from flask import current_app

from ..utils import ucfirst

MONTH_KEYS = (
    'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december',
)

# Babel numbers weekdays from Monday (0); the labels start on Sunday.
WEEKDAY_KEYS = (
    (6, 'sun'), (0, 'mon'), (1, 'tue'), (2, 'wed'),
    (3, 'thu'), (4, 'fri'), (5, 'sat'),
)


def _resolve_locale(language: str) -> Locale:
    try:
        return Locale.parse(language, sep='-')
    except (UnknownLocaleError, ValueError) as e:
        fallback = current_app.config.get('LOCALE_FALLBACK_LANGUAGE', 'en')
        current_app.logger.warning(
            f"No calendar data for language {language!r} ({e}), using {fallback!r}"
        )
        return Locale.parse(fallback)


def get_months(language: str, short: bool = False) -> Dict[str, str]:
    """Month names keyed by lowercase English month name."""
    names = get_month_names(
        'abbreviated' if short else 'wide',
        context='stand-alone',
        locale=_resolve_locale(language),
    )
    return {key: str(names[index]) for index, key in enumerate(MONTH_KEYS, start=1)}


def get_week_days(language: str, short: bool = False) -> Dict[str, str]:
    """Weekday names keyed by lowercase English abbreviation, Sunday first."""
    names = get_day_names(
        'abbreviated' if short else 'wide',
        context='stand-alone',
        locale=_resolve_locale(language),
    )
    return {key: str(names[index]) for index, key in WEEKDAY_KEYS}


def get_calendar_labels(language: str) -> Dict[str, str]:
    """Build the `loc` mapping: MonthLong*, MonthShort*, DayLong*, DayShort*."""
    labels: Dict[str, str] = {}
    for key, value in get_months(language).items():
        labels['MonthLong' + ucfirst(key)] = value
    for key, value in get_months(language, short=True).items():
        labels['MonthShort' + ucfirst(key)] = value
    for key, value in get_week_days(language).items():
        labels['DayLong' + ucfirst(key)] = value
    for key, value in get_week_days(language, short=True).items():
        labels['DayShort' + ucfirst(key)] = value
    return labels
