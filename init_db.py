import logging
import os
import sys

from config import instance_dir
from extensions import db
import models  # noqa: F401  (registers every table on db.metadata)

logger = logging.getLogger("init_db")


def init_db(app, drop=False):
    # default SQLite file lives here
    os.makedirs(instance_dir, exist_ok=True)
    with app.app_context():
        if drop:
            db.drop_all()
        db.create_all()
        logger.info(
            "schema ready on %s (%d tables)",
            app.config["SQLALCHEMY_DATABASE_URI"],
            len(db.metadata.tables),
        )


if __name__ == "__main__":
    from app import app

    init_db(app, drop="--drop" in sys.argv[1:])
