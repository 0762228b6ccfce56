"""Degree programs, plus the caller's enrollments and favorites.

- GET/POST   /degreeProgram
- GET/DELETE /degreeProgram/<id>
- GET        /me/programs
- POST/DELETE /me/programs/<id>/enroll
- POST/DELETE /me/programs/<id>/favorite
"""

from flask import jsonify
from flask_login import current_user, login_required

from . import api_bp, json_body
from extensions import db
from services import catalog, enrollment
from services.errors import AuthorizationError
from services.views import ProgramView


@api_bp.get("/degreeProgram")
def list_programs():
    return jsonify([p.to_dict() for p in catalog.list_programs(db.session)])


@api_bp.post("/degreeProgram")
@login_required
def create_program():
    payload = json_body()
    if not isinstance(payload, dict):
        payload = {}
    view = catalog.create_program(
        db.session,
        name=payload.get("name"),
        university=payload.get("university"),
        program_id=payload.get("id"),
        creator_id=current_user.id,
    )
    return jsonify(view.to_dict()), 201


@api_bp.get("/degreeProgram/<program_id>")
def get_program(program_id: str):
    program = catalog.get_program(db.session, program_id)
    return jsonify(ProgramView.from_model(program).to_dict())


@api_bp.delete("/degreeProgram/<program_id>")
@login_required
def delete_program(program_id: str):
    if not current_user.is_staff:
        raise AuthorizationError("Insufficient permissions")
    catalog.delete_program(db.session, program_id)
    return jsonify({"ok": True})


@api_bp.get("/me/programs")
@login_required
def my_programs():
    return jsonify(enrollment.my_programs(db.session, current_user.id).to_dict())


@api_bp.post("/me/programs/<program_id>/enroll")
@login_required
def enroll(program_id: str):
    enrollment.enroll(db.session, current_user.id, program_id)
    return jsonify({"ok": True}), 201


@api_bp.delete("/me/programs/<program_id>/enroll")
@login_required
def unenroll(program_id: str):
    enrollment.unenroll(db.session, current_user.id, program_id)
    return jsonify({"ok": True})


@api_bp.post("/me/programs/<program_id>/favorite")
@login_required
def favorite(program_id: str):
    enrollment.favorite(db.session, current_user.id, program_id)
    return jsonify({"ok": True}), 201


@api_bp.delete("/me/programs/<program_id>/favorite")
@login_required
def unfavorite(program_id: str):
    enrollment.unfavorite(db.session, current_user.id, program_id)
    return jsonify({"ok": True})
