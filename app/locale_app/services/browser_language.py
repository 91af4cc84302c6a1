"""Pick a site language from the browser's Accept-Language header."""
from __future__ import annotations

from typing import List, Optional, Tuple

from flask import current_app, has_request_context, request

from .settings_store import get_active_languages, get_default_language, get_redirect_languages


def _parse_weight(field: str) -> float:
    q_pos = field.find('q=')
    if q_pos == -1:
        return 1.0
    end_pos = field.find(';', q_pos)
    raw = field[q_pos + 2:] if end_pos == -1 else field[q_pos + 2:end_pos]
    try:
        return float(raw.strip())
    except ValueError:
        current_app.logger.warning(f"Ignoring malformed Accept-Language weight {raw!r}")
        return 1.0


def parse_accept_language(header: Optional[str]) -> List[Tuple[str, float]]:
    """Split a header like 'fr;q=0.8,en' into [('en', 1.0), ('fr', 0.8)].

    Candidates are cut to their primary subtag (first two characters) and
    sorted by weight, highest first. Equal weights keep header order.
    """
    candidates = []
    for field in (header or '').split(','):
        field = field.strip()
        if not field:
            continue
        candidates.append((field[:2].lower(), _parse_weight(field)))

    # sorted() is stable, so first-seen wins on a tie
    return sorted(candidates, key=lambda candidate: candidate[1], reverse=True)


def get_browser_language(for_redirect: bool = True, header: Optional[str] = None) -> str:
    """Return the preferred supported language, or the site default.

    Args:
        for_redirect: only consider the redirect languages; otherwise the
            active languages
        header: Accept-Language value; read from the current request when None
    """
    if header is None and has_request_context():
        header = request.headers.get('Accept-Language')

    if header and len(header) >= 2:
        allowed = get_redirect_languages() if for_redirect else get_active_languages()
        for language, _weight in parse_accept_language(header):
            if language in allowed:
                return language

    return get_default_language()
