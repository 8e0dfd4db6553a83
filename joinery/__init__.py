import os
import logging
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from dotenv import load_dotenv
from sqlalchemy.engine import make_url

from .config import CONFIGS, ProdConfig, is_placeholder

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)


def _store_uri(url: str, key: str | None) -> str:
    if not key:
        return url
    return make_url(url).set(password=key).render_as_string(hide_password=False)


def create_app(config_name: str | None = None) -> Flask:
    """Application factory with environment based configuration."""
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)

    # Pick configuration
    env = config_name or os.getenv('ENV') or os.getenv('FLASK_ENV') or 'production'
    cfg_cls = CONFIGS.get(env, ProdConfig)
    app.config.from_object(cfg_cls)

    # Initialise logging
    level = logging.DEBUG if app.debug else app.config.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(level=level)

    from joinery.cache import QueryCache
    from joinery.store import StoreClient

    app.extensions['query_cache'] = QueryCache(ttl=app.config.get('QUERY_CACHE_TTL'))

    store_url = app.config.get('STORE_URL')
    if is_placeholder(store_url):
        logger.warning(
            'STORE_URL is not configured; reads return empty results and writes are disabled.'
        )
        app.extensions['store'] = None
    else:
        app.config['SQLALCHEMY_DATABASE_URI'] = _store_uri(store_url, app.config.get('STORE_KEY'))
        db.init_app(app)
        migrate.init_app(app, db)

        # Ensure models loaded so tables can be created
        from joinery import models  # noqa
        with app.app_context():
            db.create_all()
        app.extensions['store'] = StoreClient(db)

    _register_error_handlers(app)

    from joinery.contacts.routes import bp as contacts_bp
    from joinery.library.routes import cabinets_bp, hardware_bp, materials_bp
    from joinery.quotes.routes import bp as quotes_bp
    from joinery.joinery_items.routes import bp as joinery_items_bp
    from joinery.projects.routes import bp as projects_bp
    from joinery.schedule.routes import bp as schedule_bp
    from joinery.tasks.routes import bp as tasks_bp
    from joinery.settings.routes import bp as settings_bp
    from joinery.cli import store_cli

    app.register_blueprint(contacts_bp, url_prefix='/contacts')
    app.register_blueprint(hardware_bp, url_prefix='/hardware')
    app.register_blueprint(materials_bp, url_prefix='/materials')
    app.register_blueprint(cabinets_bp, url_prefix='/cabinets')
    app.register_blueprint(quotes_bp, url_prefix='/quotes')
    app.register_blueprint(joinery_items_bp, url_prefix='/joinery-items')
    app.register_blueprint(projects_bp, url_prefix='/projects')
    app.register_blueprint(schedule_bp, url_prefix='/install-schedule')
    app.register_blueprint(tasks_bp, url_prefix='/tasks')
    app.register_blueprint(settings_bp, url_prefix='/settings')
    app.cli.add_command(store_cli)

    return app


def _register_error_handlers(app: Flask) -> None:
    from joinery.errors import (
        FOREIGN_KEY_VIOLATION,
        NO_ROWS,
        FlagLimitError,
        StoreError,
        StoreUnavailableError,
        ValidationError,
    )

    @app.errorhandler(ValidationError)
    def validation_failed(exc):
        return jsonify(errors=exc.errors), 400

    @app.errorhandler(FlagLimitError)
    def flag_limit(exc):
        return jsonify(error=exc.message), 409

    @app.errorhandler(StoreUnavailableError)
    def store_unavailable(exc):
        return jsonify(error=exc.message), 503

    @app.errorhandler(StoreError)
    def store_failed(exc):
        if exc.code == NO_ROWS:
            return jsonify(error='Not found'), 404
        if exc.code == FOREIGN_KEY_VIOLATION:
            return jsonify(error=exc.message, code=exc.code), 409
        return jsonify(error=exc.message, code=exc.code), 500

    @app.errorhandler(400)
    def bad_request(_):
        return jsonify(error='Bad request'), 400

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error='Not found'), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error='Method not allowed'), 405
