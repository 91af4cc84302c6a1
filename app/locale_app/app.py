"""
Fork Locale - Flask Application
Frontend language negotiation, translation lookup and locale cache management.
"""
import json
import os
from pathlib import Path

import click
from flask import Blueprint, Flask, current_app, g, jsonify, redirect, request, url_for
from flask.cli import AppGroup, with_appcontext
from flask_cors import CORS

from .config import config
from .models import APPLICATIONS, db
from .services.browser_language import get_browser_language
from .services.cache_builder import clear_cache, ensure_cache_built, rebuild_all, validate_language
from .services.language import InvalidLanguageError, get_locale, set_locale
from .services.locale_loader import load_json_cache
from .services.locale_store import LocaleStoreError, save_entry
from .services.settings_store import get_active_languages, set_module_setting
from .utils import admin_token_required, replace_placeholders

SEED_DIR = Path(__file__).resolve().parents[2] / "data" / "seeds"

bp = Blueprint('locale', __name__)
locale_cli = AppGroup('locale', help='Manage the locale caches.')


def create_app(config_name: str = 'default') -> Flask:
    """Build the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    CORS(app, resources={r"/*/locale.json": {"origins": "*"}})

    app.register_blueprint(bp)
    app.cli.add_command(locale_cli)
    app.cli.add_command(init_db_command)
    app.add_template_filter(_translate_filter, 'translate')
    app.context_processor(_inject_locale)

    app.register_error_handler(InvalidLanguageError, invalid_language)
    app.register_error_handler(LocaleStoreError, locale_store_unavailable)
    app.register_error_handler(404, not_found)
    app.register_error_handler(500, internal_error)
    return app


# ============================================================================
# TEMPLATES
# ============================================================================

def _inject_locale():
    """Expose act/err/lbl/msg to Jinja templates."""
    context = get_locale()
    return {
        'act': context.get_action,
        'err': context.get_error,
        'lbl': context.get_label,
        'msg': context.get_message,
        'LANGUAGE': context.language,
    }


def _translate_filter(text):
    """Replace {$lblFoo}-style tokens with the current translations."""
    return replace_placeholders(text, get_locale())


# ============================================================================
# ROUTES
# ============================================================================

@bp.route('/health')
def health():
    """Liveness probe."""
    return jsonify({'status': 'ok'})


@bp.route('/')
def index():
    """Send visitors to the language their browser prefers."""
    language = get_browser_language(for_redirect=True)
    current_app.logger.info(f"Redirecting visitor to /{language}/")
    return redirect(url_for('locale.home', language=language))


@bp.route('/<language>/')
def home(language):
    """Translations for a language, merged with English."""
    g.language = language
    context = set_locale(language)
    return jsonify({
        'language': context.language,
        'actions': dict(context.get_actions()),
        'errors': dict(context.get_errors()),
        'labels': dict(context.get_labels()),
        'messages': dict(context.get_messages()),
    })


@bp.route('/<language>/locale.json')
def locale_json(language):
    """The JSON cache used by frontend scripts."""
    if language not in get_active_languages():
        raise InvalidLanguageError(language)
    ensure_cache_built(language, 'frontend')
    return jsonify(load_json_cache(language, 'frontend'))


@bp.route('/api/locale/rebuild', methods=['POST'])
@admin_token_required
def rebuild_locale():
    """Rebuild locale caches after translations were edited."""
    data = request.get_json(silent=True) or {}
    application = data.get('application', 'frontend')
    if application not in APPLICATIONS:
        return jsonify({'success': False, 'message': f'Invalid application: {application}'}), 400

    languages = data.get('languages')
    if languages is not None and not isinstance(languages, list):
        return jsonify({'success': False, 'message': 'languages must be a list'}), 400

    try:
        if languages is not None:
            languages = [validate_language(language) for language in languages]
    except InvalidLanguageError as e:
        return jsonify({'success': False, 'message': str(e)}), 400

    built = rebuild_all(application, languages)
    current_app.logger.info(f"Rebuilt {application} locale for {', '.join(built)}")
    return jsonify({'success': True, 'application': application, 'languages': built})


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def invalid_language(error):
    """Unknown or inactive language."""
    return jsonify({'error': str(error), 'language': error.language}), 404


def locale_store_unavailable(error):
    """The locale table could not be read."""
    current_app.logger.error(f"Locale store unavailable: {error}")
    return jsonify({'error': 'Locale store unavailable'}), 503


def not_found(error):
    """404 error handler."""
    return jsonify({'error': 'Not found'}), 404


def internal_error(error):
    """500 error handler."""
    db.session.rollback()
    return jsonify({'error': 'Internal server error'}), 500


# ============================================================================
# COMMANDS
# ============================================================================

@locale_cli.command('build')
@click.argument('application', type=click.Choice(APPLICATIONS))
@click.argument('languages', nargs=-1)
def build_command(application, languages):
    """Rebuild locale caches (all known languages when none are given)."""
    built = rebuild_all(application, list(languages) or None)
    click.echo(f"Built {application} locale for: {', '.join(built)}")


@locale_cli.command('clear')
@click.argument('application', type=click.Choice(APPLICATIONS))
@click.option('--language', default=None, help='Only clear this language.')
def clear_command(application, language):
    """Remove locale caches so they are rebuilt on the next request."""
    removed = clear_cache(application, language)
    click.echo(f"Removed {removed} file(s)")


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create tables and load the seed translations."""
    init_database()
    click.echo("[DATABASE] Initialized successfully")


def init_database():
    """Initialize database and seed locale if needed."""
    db.create_all()

    if SEED_DIR.exists():
        for json_file in sorted(SEED_DIR.glob("*.json")):
            seed_locale_from_file(json_file)


def seed_locale_from_file(json_path: Path):
    """Seed settings and locale entries from a JSON file.

    Format: {"settings": {"core": {...}}, "locale": [{language, application,
    module, type, name, value}, ...]}
    """
    with json_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    for module, settings in payload.get("settings", {}).items():
        for key, value in settings.items():
            set_module_setting(module, key, value)

    count = 0
    for item in payload.get("locale", []):
        save_entry(
            language=item["language"],
            application=item.get("application", "frontend"),
            type=item["type"],
            name=item["name"],
            value=item["value"],
            module=item.get("module", "core"),
        )
        count += 1
    current_app.logger.info(f"Seeded {count} locale entries from {json_path.name}")


app = create_app(os.getenv('FLASK_ENV', 'development'))


# ============================================================================
# INITIALIZATION
# ============================================================================

if __name__ == '__main__':
    with app.app_context():
        init_database()
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', 1111)), debug=True)
