"""Elective pools and rules of a program.

Reads are public. Writes need a logged-in user who is staff/admin or
enrolled in the program.
"""

from flask import jsonify
from flask_login import current_user, login_required

from . import api_bp, json_body
from extensions import db
from services import electives
from services.enrollment import ensure_program_write_access


def _check_write(program_id: str) -> None:
    ensure_program_write_access(db.session, current_user, program_id)


# -----------------------------
# Pools
# -----------------------------

@api_bp.get("/degreeProgram/<program_id>/electivePools")
def list_pools(program_id: str):
    return jsonify([p.to_dict() for p in electives.list_pools(db.session, program_id)])


@api_bp.post("/degreeProgram/<program_id>/electivePools")
@login_required
def create_pool(program_id: str):
    _check_write(program_id)
    view = electives.create_pool(db.session, program_id, json_body())
    return jsonify(view.to_dict()), 201


@api_bp.get("/degreeProgram/<program_id>/electivePools/<pool_id>")
def get_pool(program_id: str, pool_id: str):
    return jsonify(electives.get_pool(db.session, program_id, pool_id).to_dict())


@api_bp.put("/degreeProgram/<program_id>/electivePools/<pool_id>")
@login_required
def update_pool(program_id: str, pool_id: str):
    _check_write(program_id)
    view = electives.update_pool(db.session, program_id, pool_id, json_body())
    return jsonify(view.to_dict())


@api_bp.delete("/degreeProgram/<program_id>/electivePools/<pool_id>")
@login_required
def delete_pool(program_id: str, pool_id: str):
    _check_write(program_id)
    electives.delete_pool(db.session, program_id, pool_id)
    return jsonify({"ok": True})


@api_bp.post("/degreeProgram/<program_id>/electivePools/<pool_id>/subjects")
@login_required
def add_pool_subject(program_id: str, pool_id: str):
    _check_write(program_id)
    link = electives.add_pool_subject(db.session, program_id, pool_id, json_body())
    return jsonify(link.to_dict()), 201


@api_bp.delete("/degreeProgram/<program_id>/electivePools/<pool_id>/subjects/<subject_id>")
@login_required
def remove_pool_subject(program_id: str, pool_id: str, subject_id: str):
    _check_write(program_id)
    electives.remove_pool_subject(db.session, program_id, pool_id, subject_id)
    return jsonify({"ok": True})


# -----------------------------
# Rules
# -----------------------------

@api_bp.get("/degreeProgram/<program_id>/electiveRules")
def list_rules(program_id: str):
    return jsonify([r.to_dict() for r in electives.list_rules(db.session, program_id)])


@api_bp.post("/degreeProgram/<program_id>/electiveRules")
@login_required
def create_rule(program_id: str):
    _check_write(program_id)
    view = electives.create_rule(db.session, program_id, json_body())
    return jsonify(view.to_dict()), 201


@api_bp.get("/degreeProgram/<program_id>/electiveRules/<rule_id>")
def get_rule(program_id: str, rule_id: str):
    return jsonify(electives.get_rule(db.session, program_id, rule_id).to_dict())


@api_bp.put("/degreeProgram/<program_id>/electiveRules/<rule_id>")
@login_required
def update_rule(program_id: str, rule_id: str):
    _check_write(program_id)
    view = electives.update_rule(db.session, program_id, rule_id, json_body())
    return jsonify(view.to_dict())


@api_bp.delete("/degreeProgram/<program_id>/electiveRules/<rule_id>")
@login_required
def delete_rule(program_id: str, rule_id: str):
    _check_write(program_id)
    electives.delete_rule(db.session, program_id, rule_id)
    return jsonify({"ok": True})
