from flask import Blueprint, abort, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from extensions import db
from models.user import User
from services.enrollment import enrolled_program_ids
from services.errors import ConflictError, ValidationError
from services.transaction import atomic

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

MIN_PASSWORD_LEN = 8


def _credentials():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("invalid JSON")
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""
    if not email or "@" not in email:
        raise ValidationError("valid email is required")
    if not isinstance(password, str) or not password:
        raise ValidationError("password is required")
    return email, password


def _user_dict(user: User):
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "enrolledProgramIds": enrolled_program_ids(db.session, user.id),
    }


@auth_bp.route("/register", methods=["POST"])
def register():
    email, password = _credentials()
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LEN} characters")

    with atomic(db.session, "register"):
        # check if user already exists
        if User.query.filter_by(email=email).first():
            raise ConflictError("Email already exists")

        user = User(email=email)
        user.set_password(password)
        db.session.add(user)

    login_user(user)
    return jsonify(_user_dict(user)), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    email, password = _credentials()

    user = User.query.filter_by(email=email).first()
    if user is None or not user.check_password(password):
        abort(401, description="Invalid email or password")

    login_user(user)
    return jsonify(_user_dict(user))


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(_user_dict(current_user))
