import uuid

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db, login_manager, utcnow

ROLES = ("student", "staff", "admin")


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(191), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(191), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="student")
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    enrollments = db.relationship(
        "Enrollment",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    favorites = db.relationship(
        "FavoriteProgram",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    progress = db.relationship(
        "UserSubject",
        back_populates="user",
        cascade="all",
        passive_deletes=True,
        lazy=True,
    )

    def set_password(self, password: str) -> None:
        # use PBKDF2 instead of the default scrypt
        self.password_hash = generate_password_hash(
            password,
            method="pbkdf2:sha256",
            salt_length=16,
        )

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_staff(self) -> bool:
        return self.role in ("admin", "staff")

    def __repr__(self) -> str:
        return f"<User {self.email}>"


@login_manager.user_loader
def load_user(user_id: str):
    return db.session.get(User, user_id)
