from flask import jsonify
from flask_login import login_required

from . import api_bp, json_body
from extensions import db
from services import catalog


@api_bp.post("/subjects")
@login_required
def create_subject():
    fields = catalog.parse_subject_payload(json_body(), partial=False)
    view = catalog.create_subject(db.session, **fields)
    return jsonify(view.to_dict()), 201


@api_bp.get("/subjects/<program_id>")
def list_subjects(program_id: str):
    return jsonify([s.to_dict() for s in catalog.list_subjects(db.session, program_id)])


@api_bp.put("/subjects/<subject_id>")
@login_required
def update_subject(subject_id: str):
    # 404 before body validation, like the other resource routes
    catalog.get_subject(db.session, subject_id)
    changes = catalog.parse_subject_payload(json_body(), partial=True)
    view = catalog.update_subject(db.session, subject_id, changes)
    return jsonify(view.to_dict())


@api_bp.delete("/subjects/<subject_id>")
@login_required
def delete_subject(subject_id: str):
    catalog.delete_subject(db.session, subject_id)
    return jsonify({"ok": True})
