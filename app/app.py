"""
MangaShelf - Manga catalog and reader backend
Application factory and startup
"""
import warnings
import sys
import logging

# Suppress Flask-Limiter in-memory storage warning
warnings.filterwarnings("ignore", category=UserWarning, module="flask_limiter")

import flask.cli
flask.cli.show_server_banner = lambda *args: None

# Core Flask imports
from flask import Flask
import click
import structlog

# Local imports
from constants import BUILD_VERSION
from settings import load_settings
from db import db, migrate, init_db, json_serializer
from auth import auth_blueprint, login_manager, init_admin_from_environment
from exceptions import register_exception_handlers
from metrics import init_metrics
from middleware.rate_limit import limiter
from utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs

# Routes
from routes.manga import manga_bp
from routes.chapters import chapters_bp
from routes.ratings import ratings_bp
from routes.bookmarks import bookmarks_bp
from routes.comments import comments_bp
from routes.discovery import genres_bp, trending_bp
from routes.users import users_bp
from routes.notifications import notifications_bp
from routes.reports import reports_bp
from routes.system import system_bp
from services import notification_service

logger = structlog.get_logger('main')


def configure_logging(settings):
    """Colored stdlib logging plus structlog on top of it"""
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Apply filter to hide date from http access logs
    logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())
    logging.getLogger('alembic.runtime.migration').setLevel(logging.WARNING)


def register_commands(app):
    @app.cli.command("cleanup-notifications")
    @click.option("--days", type=int, default=None, help="Keep notifications newer than this many days")
    def cleanup_notifications(days):
        """Delete stored notifications past their retention period"""
        if days is None:
            days = app.settings.notification_retention_days
        deleted = notification_service.cleanup(days)
        click.echo(f"Deleted {deleted} notifications")


def create_app(settings=None):
    """Application factory"""
    settings = settings or load_settings()
    configure_logging(settings)

    app = Flask(__name__)
    app.settings = settings
    app.config["SQLALCHEMY_DATABASE_URI"] = settings.database_uri
    app.config['SECRET_KEY'] = settings.jwt_secret
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {"json_serializer": json_serializer}
    app.config['TESTING'] = settings.testing

    # Initialize components
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(manga_bp)
    app.register_blueprint(chapters_bp)
    app.register_blueprint(ratings_bp)
    app.register_blueprint(bookmarks_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(genres_bp)
    app.register_blueprint(trending_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(system_bp)

    register_commands(app)

    # Initialize metrics
    init_metrics(app)

    # Initialize database
    init_db(app)
    if not settings.testing:
        with app.app_context():
            init_admin_from_environment()

    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f'Build Version: {BUILD_VERSION}')
    logger.info(f'Starting server on port {app.settings.port}...')
    app.run(debug=False, use_reloader=False, host=app.settings.host, port=app.settings.port)
