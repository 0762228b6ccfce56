"""The caller's subject statuses.

- GET  /me/subjects              first enrolled program
- GET  /me/subjects/<programId>
- POST /me/subjects/<programId>  replace the statuses for that program
"""

from flask import current_app, jsonify
from flask_login import current_user, login_required

from . import api_bp, json_body
from extensions import db
from services.enrollment import require_enrollment
from services.progress import parse_progress_entries, project_progress, sync_progress


@api_bp.get("/me/subjects")
@api_bp.get("/me/subjects/<program_id>")
@login_required
def my_subjects(program_id=None):
    return jsonify(project_progress(db.session, current_user.id, program_id).to_dict())


@api_bp.post("/me/subjects/<program_id>")
@login_required
def save_my_subjects(program_id: str):
    # membership is checked before the body so outsiders always get a 403
    require_enrollment(db.session, current_user.id, program_id)
    entries = parse_progress_entries(json_body())
    result = sync_progress(
        db.session,
        current_user.id,
        program_id,
        entries,
        max_entries=current_app.config["MAX_SUBJECTS_PAYLOAD"],
    )
    return jsonify(result.to_dict())
