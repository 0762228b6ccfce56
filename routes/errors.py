from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from extensions import db, login_manager
from services.errors import CurriculumError


def _error(message: str, status_code: int):
    return jsonify({"ok": False, "error": message}), status_code


@login_manager.unauthorized_handler
def unauthorized():
    return _error("Unauthorized", 401)


def register_error_handlers(app):
    @app.errorhandler(CurriculumError)
    def handle_curriculum_error(err: CurriculumError):
        if err.status_code >= 500:
            current_app.logger.error("request failed: %s", err.message)
        return _error(err.message, err.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        if err.code is None or err.code < 400:
            return err
        return _error(err.description, err.code)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(err: SQLAlchemyError):
        # anything that escaped services.transaction.atomic
        db.session.rollback()
        current_app.logger.exception("unhandled store error")
        return _error("Internal server error", 500)
