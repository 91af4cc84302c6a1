"""Utility functions for the Flask application."""
import hmac
import re
from functools import wraps

from flask import current_app, jsonify, request

PLACEHOLDER_PATTERN = re.compile(r'\{\$(act|err|lbl|msg)([A-Za-z0-9_]+)\}')


def ucfirst(value: str) -> str:
    """Uppercase the first character, leave the rest alone."""
    value = str(value)
    return value[:1].upper() + value[1:]


def to_camel_case(value: str, separator: str = '_', lcfirst: bool = False) -> str:
    """Convert `some_key` into `SomeKey` (or `someKey` with lcfirst)."""
    result = ''.join(ucfirst(part) for part in str(value).split(separator))
    if lcfirst:
        result = result[:1].lower() + result[1:]
    return result


def replace_placeholders(text: str, context) -> str:
    """Substitute {$lblFoo}-style tokens with translations from a locale context.

    Tokens without a translation are kept exactly as written.
    """
    def _substitute(match):
        result = context.lookup(match.group(1), match.group(2))
        return result.value if result.found else match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, str(text))


def admin_token_required(f):
    """Decorator to require the admin bearer token for a route."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get('LOCALE_ADMIN_TOKEN') or ''
        header = request.headers.get('Authorization', '')
        supplied = header[len('Bearer '):] if header.startswith('Bearer ') else ''
        if not expected or not hmac.compare_digest(supplied.encode('utf-8'), expected.encode('utf-8')):
            current_app.logger.warning(f"Refused unauthenticated request to {request.path}")
            return jsonify({'error': 'Not authenticated'}), 401
        return f(*args, **kwargs)
    return decorated_function
