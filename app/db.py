from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine
import json
import logging
import os
from utils import now_utc

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()
migrate = Migrate()


def json_serializer(value):
    """JSON columns keep non-ASCII text as-is so LIKE filters over them match"""
    return json.dumps(value, ensure_ascii=False)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign keys so ON DELETE CASCADE is honoured by SQLite"""
    if dbapi_connection.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(app):
    """Create missing tables for every registered model"""
    # Register models on the metadata before create_all
    import models  # noqa: F401

    with app.app_context():
        database = db.engine.url.database
        if db.engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(database)), exist_ok=True)
        db.create_all()
        logger.info(f"Database ready ({db.engine.url.get_backend_name()})")
