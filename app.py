from logging.config import dictConfig

from flask import Flask, jsonify

from config import Config
from extensions import db, login_manager


def configure_logging(level: str) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
                }
            },
            "handlers": {
                "wsgi": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://flask.logging.wsgi_errors_stream",
                    "formatter": "default",
                }
            },
            "root": {"level": level, "handlers": ["wsgi"]},
        }
    )


def create_app(config_class=Config):
    configure_logging(config_class.LOG_LEVEL)

    app = Flask(__name__)
    app.config.from_object(config_class)

    # init extentions
    db.init_app(app)
    login_manager.init_app(app)

    # import and register blueprints
    from auth.routes import auth_bp
    from routes import api_bp
    from routes.debug import debug_bp
    from routes.errors import register_error_handlers

    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(debug_bp)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
