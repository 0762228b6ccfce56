import os

from dotenv import load_dotenv

# Absolute path to project root
# (a stable anchor for all file paths)
basedir = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(basedir, ".env"))

# Runtime only directory (DB, uploads, secrets)
instance_dir = os.path.join(basedir, "instance")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(instance_dir, "app.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Program catalogs (CSV + xlsx files) picked up by seed_catalog_db.py
    CATALOG_DIR = os.environ.get("CATALOG_DIR", os.path.join(basedir, "data_catalog"))

    # Upper bound on entries in one progress sync (bounds transaction cost)
    MAX_SUBJECTS_PAYLOAD = int(os.environ.get("MAX_SUBJECTS_PAYLOAD", "500"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
