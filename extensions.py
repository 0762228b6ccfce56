import sqlite3
from datetime import datetime, timezone

from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()
login_manager = LoginManager()


def utcnow() -> datetime:
    """Current UTC time, naive, to match the plain DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# SQLite ships with FK enforcement off; the cascades in models/ depend on it.
@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
