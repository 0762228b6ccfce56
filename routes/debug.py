from flask import Blueprint, jsonify

from extensions import db
from services.requirements import requirement_graph

debug_bp = Blueprint("debug", __name__, url_prefix="/debug")


@debug_bp.route("/programs/<program_id>/requirement-graph")
def program_requirement_graph(program_id: str):
    # Cycles are allowed in storage; this only reports them.
    graph = requirement_graph(db.session, program_id)
    return jsonify(graph.to_dict())
